from datetime import date

from conftest import AP, BANK, INVENTORY, RENT, make_entry
from notifications import build_notifications, due_soon
from schemas import AccountMapping, ReportOptions

TODAY = date(2024, 5, 10)


def bill(entry_id, due):
    return make_entry(
        date(2024, 5, 1), [(RENT, 100, 0), (AP, 0, 100)], f"Rent bill {entry_id}",
        due_date=due, id=entry_id,
    )


def test_due_soon_window_is_inclusive():
    entries = [
        bill(1, date(2024, 5, 10)),
        bill(2, date(2024, 5, 13)),
        bill(3, date(2024, 5, 14)),
        bill(4, date(2024, 5, 9)),
        make_entry(TODAY, [(BANK, 1, 0), (AP, 0, 1)], id=5),
    ]
    assert [n.id for n in due_soon(entries, TODAY, 3)] == ["due-1", "due-2"]


def test_low_inventory_warning(chart):
    entries = [make_entry(date(2024, 5, 1), [(INVENTORY, 400, 0), (BANK, 0, 400)])]
    notes = build_notifications(chart, entries, TODAY, low_stock_threshold=1000)
    [stock] = notes
    assert stock.id == "stock-2024-05-10"
    assert stock.message == "Low inventory value: $ 400.00 (threshold $ 1,000.00)"


def test_stock_above_threshold_is_quiet(chart):
    entries = [make_entry(date(2024, 5, 1), [(INVENTORY, 4000, 0), (BANK, 0, 4000)])]
    assert build_notifications(chart, entries, TODAY, low_stock_threshold=1000) == []


def test_no_inventory_account_no_stock_warning(chart):
    mapping = AccountMapping(inventory=["Warehouse"])
    assert build_notifications(chart, [], TODAY, mapping=mapping) == []


def test_ids_are_stable_across_calls(chart):
    entries = [bill(7, date(2024, 5, 11))]
    options = ReportOptions(show_currency_sign=False)
    first = build_notifications(chart, entries, TODAY, options=options)
    second = build_notifications(chart, entries, TODAY, options=options)
    assert [n.id for n in first] == [n.id for n in second] == ["due-7", "stock-2024-05-10"]
