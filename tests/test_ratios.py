from datetime import date

import pytest

from conftest import BANK, EQUITY, make_account, make_entry
from ratios import build_ratio_report, compute_ratios, safe_divide
from schemas import AccountType, RatioInputs
from utils import format_ratio


def test_ratios_for_the_quarter(chart, journal):
    report = build_ratio_report(chart, journal)
    i = report.inputs
    assert i.current_assets == 13800
    assert i.current_liabilities == 2200
    assert i.inventory == 1800
    assert i.total_equity == 10600
    r = report.ratios
    assert r["current_ratio"] == pytest.approx(13800 / 2200)
    assert r["quick_ratio"] == pytest.approx(12000 / 2200)
    assert r["gross_profit_margin"] == pytest.approx(1400 / 2600)
    assert r["net_profit_margin"] == pytest.approx(600 / 2600)
    assert r["return_on_assets"] == pytest.approx(600 / 17800)
    assert r["debt_to_assets"] == pytest.approx(7200 / 17800)
    assert r["debt_to_equity"] == pytest.approx(7200 / 10600)
    assert r["asset_turnover"] == pytest.approx(2600 / 17800)
    assert r["inventory_turnover"] == pytest.approx(1200 / 1800)


def test_equity_is_derived_not_the_raw_equity_accounts(chart, journal):
    report = build_ratio_report(chart, journal)
    # raw equity accounts hold 10000, retained earnings add the 600 of profit
    assert report.inputs.total_equity == report.inputs.total_assets - report.inputs.total_liabilities
    assert report.inputs.total_equity != 10000


def test_no_liabilities_gives_undefined_current_ratio(chart):
    entries = [make_entry(date(2024, 1, 1), [(BANK, 500, 0), (EQUITY, 0, 500)])]
    report = build_ratio_report(chart, entries)
    assert report.ratios["current_ratio"] is None
    assert report.ratios["quick_ratio"] is None
    assert report.ratios["debt_to_assets"] == 0
    assert format_ratio(report.ratios["current_ratio"]) == "N/A"


def test_empty_ledger_never_crashes():
    accounts = [make_account(1, "10000", "Cash", AccountType.ASSET)]
    report = build_ratio_report(accounts, [])
    assert all(v is None for v in report.ratios.values())


def test_safe_divide():
    assert safe_divide(1, 0) is None
    assert safe_divide(0.0, -0.0) is None
    assert safe_divide(3, 2) == 1.5


def test_compute_ratios_names():
    inputs = RatioInputs(
        current_assets=0, current_liabilities=0, inventory=0, total_assets=0,
        total_liabilities=0, total_equity=0, revenue=0, cogs=0, net_income=0,
    )
    assert set(compute_ratios(inputs)) == {
        "current_ratio", "quick_ratio", "gross_profit_margin", "net_profit_margin",
        "return_on_assets", "debt_to_assets", "debt_to_equity", "asset_turnover",
        "inventory_turnover",
    }
