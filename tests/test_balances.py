from datetime import date

from hypothesis import given, strategies as st

from conftest import AR, BANK, CASH, EQUITY, SALES, build_chart, make_account, make_entry
from schemas import AccountType
from utils import (
    entries_in_period,
    get_account_balance,
    get_account_type_balance,
    in_period,
    net_movement,
)


def _by_id(accounts, account_id):
    return next(a for a in accounts if a.id == account_id)


class TestAccountBalance:
    def test_debit_normal_account(self, chart, journal):
        assert get_account_balance(_by_id(chart, BANK), journal) == 11500

    def test_credit_normal_account(self, chart, journal):
        assert get_account_balance(_by_id(chart, SALES), journal) == 2000
        assert get_account_balance(_by_id(chart, EQUITY), journal) == 10000

    def test_opening_balance_is_added_in_normal_sign(self):
        loan = make_account(1, "25000", "Loan", AccountType.LIABILITY, opening_balance=300)
        entries = [make_entry(date(2024, 1, 1), [(1, 100, 0), (2, 0, 100)])]
        assert get_account_balance(loan, entries) == 200

    def test_no_lines_returns_opening_balance(self):
        acc = make_account(1, "10000", "Cash", AccountType.ASSET, opening_balance=75)
        assert get_account_balance(acc, []) == 75

    def test_missing_account_is_zero(self, journal):
        assert get_account_balance(None, journal) == 0.0

    def test_date_window_is_inclusive(self, chart, journal):
        bank = _by_id(chart, BANK)
        # 2024-01-05 loan and 2024-01-10 equipment purchase, both on the bounds
        assert get_account_balance(bank, journal, date(2024, 1, 5), date(2024, 1, 10)) == 1000

    def test_inverted_window_matches_nothing(self, chart, journal):
        assert entries_in_period(journal, date(2024, 3, 1), date(2024, 2, 1)) == []
        assert net_movement(_by_id(chart, BANK), journal, date(2024, 3, 1), date(2024, 2, 1)) == 0

    def test_in_period_open_ended(self):
        assert in_period(date(1999, 1, 1))
        assert in_period(date(2024, 1, 1), start=date(2024, 1, 1))
        assert not in_period(date(2024, 1, 2), end=date(2024, 1, 1))


class TestAccountTypeBalance:
    def test_sums_every_account_of_the_type(self, chart, journal):
        assert get_account_type_balance(journal, chart, AccountType.ASSET) == 17800
        assert get_account_type_balance(journal, chart, AccountType.LIABILITY) == 7200
        assert get_account_type_balance(journal, chart, AccountType.INCOME) == 2600
        assert get_account_type_balance(journal, chart, AccountType.EXPENSE) == 2000

    def test_empty_ledger(self, chart):
        assert get_account_type_balance([], chart, AccountType.ASSET) == 0


def test_bank_and_sales_example():
    bank = make_account(1, "10000", "Bank", AccountType.ASSET)
    sales = make_account(2, "40000", "Sales", AccountType.INCOME)
    entries = [make_entry(date(2024, 1, 1), [(1, 500, 0), (2, 0, 500)])]
    assert get_account_balance(bank, entries) == 500
    assert get_account_balance(sales, entries) == 500


JOURNAL = [
    make_entry(date(2024, 1, d), [(CASH, 10 * d, 0), (SALES, 0, 10 * d)]) for d in range(1, 11)
] + [
    make_entry(date(2024, 2, d), [(AR, 0, 7 * d), (BANK, 7 * d, 0)]) for d in range(1, 6)
]


@given(st.permutations(JOURNAL))
def test_balance_does_not_depend_on_order(shuffled):
    for acc in build_chart():
        assert abs(get_account_balance(acc, shuffled) - get_account_balance(acc, JOURNAL)) < 1e-9


@given(st.dates(date(2023, 12, 1), date(2024, 3, 1)), st.dates(date(2023, 12, 1), date(2024, 3, 1)))
def test_inverted_range_yields_nothing(a, b):
    start, end = max(a, b), min(a, b)
    if start == end:
        return
    assert entries_in_period(JOURNAL, start, end) == []
