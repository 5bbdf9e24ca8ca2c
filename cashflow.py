"""
Indirect-method cash flow statement.

Operating cash starts from the period's net income and is adjusted by the
movement of the working-capital accounts. Investing and financing take the
cash that moved through the remaining balance-sheet accounts. The sum must
equal the change of the cash accounts themselves; the result carries that
check in ``reconciliation``.
"""
from datetime import date, timedelta
from typing import Optional, Sequence

from logging_setup import get_logger
from schemas import (
    AccountMapping,
    AccountRecord,
    AccountType,
    CashFlowLine,
    CashFlowSection,
    CashFlowStatement,
    JournalEntryRecord,
    OperatingActivities,
    Reconciliation,
    TOLERANCE,
    WorkingCapitalLine,
)
from utils import (
    accounts_named,
    get_account_balance,
    is_zero,
    net_movement,
    raw_totals,
    sorted_by_code,
    sum_balances,
)

log = get_logger("ledger.cashflow")

BALANCE_SHEET_TYPES = {AccountType.ASSET, AccountType.LIABILITY}


def classify_accounts(accounts: Sequence[AccountRecord], mapping: AccountMapping):
    """Split the chart into cash, working capital, investing and financing accounts."""
    cash = accounts_named(accounts, mapping.cash, types={AccountType.ASSET})
    cash_ids = {a.id for a in cash}

    wc_names = mapping.receivable + mapping.inventory + mapping.payable
    working_capital = [
        a for a in accounts_named(accounts, wc_names, types=BALANCE_SHEET_TYPES)
        if a.id not in cash_ids
    ]
    wc_ids = {a.id for a in working_capital}

    investing = [
        a for a in accounts
        if a.type == AccountType.ASSET and a.id not in cash_ids and a.id not in wc_ids
    ]
    # loans and other non-working-capital liabilities are financed, like equity
    financing = [
        a for a in accounts
        if a.type == AccountType.EQUITY or (a.type == AccountType.LIABILITY and a.id not in wc_ids)
    ]
    return cash, working_capital, investing, financing


def _cash_movement_lines(accounts, transactions, start, end):
    lines = []
    for acc in sorted_by_code(accounts):
        dr, cr = raw_totals(acc.id, transactions, start, end)
        amount = cr - dr
        if is_zero(amount):
            continue
        lines.append(CashFlowLine(account_id=acc.id, name=acc.name, amount=amount))
    return lines


def build_cash_flow_statement(
    accounts: Sequence[AccountRecord],
    transactions: Sequence[JournalEntryRecord],
    start: date,
    end: date,
    mapping: Optional[AccountMapping] = None,
) -> CashFlowStatement:
    if start > end:
        raise ValueError(f"cash flow period starts after it ends ({start} > {end})")

    mapping = mapping or AccountMapping()
    day_before = start - timedelta(days=1)
    cash, working_capital, investing, financing = classify_accounts(accounts, mapping)

    # income and expense activity only; opening balances never move cash
    net_income = sum(
        (net_movement(a, transactions, start, end) for a in accounts if a.type == AccountType.INCOME),
        0.0,
    ) - sum(
        (net_movement(a, transactions, start, end) for a in accounts if a.type == AccountType.EXPENSE),
        0.0,
    )

    adjustments = []
    for acc in sorted_by_code(working_capital):
        start_balance = get_account_balance(acc, transactions, None, day_before)
        end_balance = get_account_balance(acc, transactions, None, end)
        change = end_balance - start_balance
        # more receivables or stock ties up cash, more payables frees it
        cash_effect = -change if acc.type == AccountType.ASSET else change
        adjustments.append(WorkingCapitalLine(
            account_id=acc.id, name=acc.name, type=acc.type,
            start_balance=start_balance, end_balance=end_balance,
            change=change, cash_effect=cash_effect,
        ))
    total_wc_change = sum((a.cash_effect for a in adjustments), 0.0)
    operating = OperatingActivities(
        net_income=net_income,
        adjustments=adjustments,
        total_working_capital_change=total_wc_change,
        total=net_income + total_wc_change,
    )

    investing_lines = _cash_movement_lines(investing, transactions, start, end)
    financing_lines = _cash_movement_lines(financing, transactions, start, end)
    investing_section = CashFlowSection(lines=investing_lines, total=sum((l.amount for l in investing_lines), 0.0))
    financing_section = CashFlowSection(lines=financing_lines, total=sum((l.amount for l in financing_lines), 0.0))

    net_cash_flow = operating.total + investing_section.total + financing_section.total
    beginning_cash = sum_balances(cash, transactions, None, day_before)
    ending_cash = sum_balances(cash, transactions, None, end)

    expected = beginning_cash + net_cash_flow
    difference = round(ending_cash - expected, 2)
    is_reconciled = abs(ending_cash - expected) < TOLERANCE
    if not is_reconciled:
        log.error(
            "cash flow does not reconcile for %s to %s: beginning %.2f + net %.2f != ending %.2f",
            start, end, beginning_cash, net_cash_flow, ending_cash,
        )

    return CashFlowStatement(
        start=start, end=end,
        operating=operating,
        investing=investing_section,
        financing=financing_section,
        net_cash_flow=net_cash_flow,
        beginning_cash=beginning_cash,
        ending_cash=ending_cash,
        reconciliation=Reconciliation(
            expected_ending_cash=expected,
            difference=difference,
            is_reconciled=is_reconciled,
        ),
    )
