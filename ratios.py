from datetime import date
from typing import Optional, Sequence

from schemas import (
    AccountMapping,
    AccountRecord,
    AccountType,
    JournalEntryRecord,
    RatioInputs,
    RatioReport,
)
from utils import accounts_named, get_account_type_balance, sum_balances

NON_CURRENT_SUBTYPES = {"NON_CURRENT_ASSET", "NON_CURRENT_LIABILITY"}
EPSILON = 1e-9


def safe_divide(numerator: float, denominator: float) -> Optional[float]:
    """None when the denominator is zero; callers render it as N/A."""
    if abs(denominator) < EPSILON:
        return None
    return numerator / denominator


def _current(accounts, type):
    return [a for a in accounts if a.type == type and a.subtype not in NON_CURRENT_SUBTYPES]


def ratio_inputs(
    accounts: Sequence[AccountRecord],
    transactions: Sequence[JournalEntryRecord],
    start: Optional[date] = None,
    end: Optional[date] = None,
    mapping: Optional[AccountMapping] = None,
) -> RatioInputs:
    mapping = mapping or AccountMapping()

    # balance-sheet figures as of the end date, income figures over the window
    total_assets = get_account_type_balance(transactions, accounts, AccountType.ASSET, None, end)
    total_liabilities = get_account_type_balance(transactions, accounts, AccountType.LIABILITY, None, end)
    revenue = get_account_type_balance(transactions, accounts, AccountType.INCOME, start, end)
    expenses = get_account_type_balance(transactions, accounts, AccountType.EXPENSE, start, end)
    inventory = sum_balances(
        accounts_named(accounts, mapping.inventory, types={AccountType.ASSET}), transactions, None, end
    )
    cogs = sum_balances(
        accounts_named(accounts, mapping.cogs, types={AccountType.EXPENSE}), transactions, start, end
    )

    return RatioInputs(
        current_assets=sum_balances(_current(accounts, AccountType.ASSET), transactions, None, end),
        current_liabilities=sum_balances(_current(accounts, AccountType.LIABILITY), transactions, None, end),
        inventory=inventory,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        # derived, so retained earnings are folded in
        total_equity=total_assets - total_liabilities,
        revenue=revenue,
        cogs=cogs,
        net_income=revenue - expenses,
    )


def compute_ratios(inputs: RatioInputs) -> dict:
    i = inputs
    return {
        "current_ratio": safe_divide(i.current_assets, i.current_liabilities),
        "quick_ratio": safe_divide(i.current_assets - i.inventory, i.current_liabilities),
        "gross_profit_margin": safe_divide(i.revenue - i.cogs, i.revenue),
        "net_profit_margin": safe_divide(i.net_income, i.revenue),
        "return_on_assets": safe_divide(i.net_income, i.total_assets),
        "debt_to_assets": safe_divide(i.total_liabilities, i.total_assets),
        "debt_to_equity": safe_divide(i.total_liabilities, i.total_equity),
        "asset_turnover": safe_divide(i.revenue, i.total_assets),
        "inventory_turnover": safe_divide(i.cogs, i.inventory),
    }


def build_ratio_report(
    accounts: Sequence[AccountRecord],
    transactions: Sequence[JournalEntryRecord],
    start: Optional[date] = None,
    end: Optional[date] = None,
    mapping: Optional[AccountMapping] = None,
) -> RatioReport:
    inputs = ratio_inputs(accounts, transactions, start, end, mapping)
    return RatioReport(start=start, end=end, inputs=inputs, ratios=compute_ratios(inputs))
