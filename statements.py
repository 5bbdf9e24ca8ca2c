from datetime import date
from typing import List, Optional, Sequence

from logging_setup import get_logger
from schemas import (
    AccountMapping,
    AccountRecord,
    AccountType,
    BalanceSheet,
    FinancialSummary,
    GeneralLedger,
    GeneralLedgerRow,
    IncomeStatement,
    JournalEntryRecord,
    ReportOptions,
    StatementLine,
    TOLERANCE,
    TrialBalance,
    TrialBalanceRow,
)
from utils import (
    account_label,
    accounts_named,
    entries_in_period,
    get_account_balance,
    is_debit_normal,
    is_zero,
    raw_totals,
    sorted_by_code,
    sum_balances,
)

log = get_logger("ledger.statements")


# ---------------------- Trial Balance ----------------------
def build_trial_balance(
    accounts: Sequence[AccountRecord],
    transactions: Sequence[JournalEntryRecord],
    start: Optional[date] = None,
    end: Optional[date] = None,
    options: Optional[ReportOptions] = None,
) -> TrialBalance:
    options = options or ReportOptions()
    rows = []
    total_debit = 0.0
    total_credit = 0.0

    for acc in sorted_by_code(accounts):
        dr, cr = raw_totals(acc.id, transactions, start, end)
        net = dr - cr if is_debit_normal(acc) else cr - dr
        # a credit-normal account with a positive net sits in the credit column
        if is_debit_normal(acc):
            display_debit, display_credit = (net, 0.0) if net > 0 else (0.0, -net)
        else:
            display_debit, display_credit = (0.0, net) if net > 0 else (-net, 0.0)

        total_debit += display_debit
        total_credit += display_credit
        if not options.show_zero_balances and is_zero(display_debit) and is_zero(display_credit):
            continue
        rows.append(TrialBalanceRow(
            account_id=acc.id, code=acc.code, name=acc.name, type=acc.type,
            debit=dr, credit=cr, net=net,
            display_debit=display_debit, display_credit=display_credit,
        ))

    difference = round(total_debit - total_credit, 2)
    is_balanced = abs(total_debit - total_credit) < TOLERANCE
    if not is_balanced:
        log.warning("trial balance out of balance by %.2f (%s to %s)", difference, start, end)

    return TrialBalance(
        start=start, end=end, rows=rows,
        total_debit=total_debit, total_credit=total_credit,
        difference=difference, is_balanced=is_balanced,
    )


# ---------------------- Income Statement ----------------------
def _statement_lines(accounts, transactions, type, start, end, options) -> List[StatementLine]:
    lines = []
    for acc in sorted_by_code(a for a in accounts if a.type == type):
        bal = get_account_balance(acc, transactions, start, end)
        if is_zero(bal) and not options.show_zero_balances:
            continue
        lines.append(StatementLine(
            account_id=acc.id, code=acc.code, name=acc.name,
            label=account_label(acc, options), balance=bal,
        ))
    return lines


def _type_total(accounts, transactions, type, start, end) -> float:
    return sum_balances((a for a in accounts if a.type == type), transactions, start, end)


def build_income_statement(
    accounts: Sequence[AccountRecord],
    transactions: Sequence[JournalEntryRecord],
    start: Optional[date] = None,
    end: Optional[date] = None,
    options: Optional[ReportOptions] = None,
) -> IncomeStatement:
    options = options or ReportOptions()
    total_revenue = _type_total(accounts, transactions, AccountType.INCOME, start, end)
    total_expense = _type_total(accounts, transactions, AccountType.EXPENSE, start, end)

    return IncomeStatement(
        start=start, end=end,
        revenue_lines=_statement_lines(accounts, transactions, AccountType.INCOME, start, end, options),
        expense_lines=_statement_lines(accounts, transactions, AccountType.EXPENSE, start, end, options),
        total_revenue=total_revenue,
        total_expense=total_expense,
        net_income=total_revenue - total_expense,
    )


# ---------------------- Balance Sheet ----------------------
def build_balance_sheet(
    accounts: Sequence[AccountRecord],
    transactions: Sequence[JournalEntryRecord],
    start: Optional[date] = None,
    end: Optional[date] = None,
    options: Optional[ReportOptions] = None,
) -> BalanceSheet:
    """Assets against liabilities and equity.

    Net income of the window is not posted anywhere; it is shown as an
    addition to equity so that A = L + E + NI.
    """
    options = options or ReportOptions()
    total_assets = _type_total(accounts, transactions, AccountType.ASSET, start, end)
    total_liabilities = _type_total(accounts, transactions, AccountType.LIABILITY, start, end)
    total_equity = _type_total(accounts, transactions, AccountType.EQUITY, start, end)
    net_income = build_income_statement(accounts, transactions, start, end, options).net_income

    liabilities_and_equity = total_liabilities + total_equity + net_income
    difference = round(total_assets - liabilities_and_equity, 2)
    is_balanced = abs(total_assets - liabilities_and_equity) < TOLERANCE
    if not is_balanced:
        log.warning(
            "balance sheet does not balance: assets %.2f, liabilities + equity %.2f",
            total_assets, liabilities_and_equity,
        )

    return BalanceSheet(
        start=start, end=end,
        assets=_statement_lines(accounts, transactions, AccountType.ASSET, start, end, options),
        liabilities=_statement_lines(accounts, transactions, AccountType.LIABILITY, start, end, options),
        equity=_statement_lines(accounts, transactions, AccountType.EQUITY, start, end, options),
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        total_equity=total_equity,
        net_income=net_income,
        total_liabilities_and_equity=liabilities_and_equity,
        difference=difference,
        is_balanced=is_balanced,
    )


# ---------------------- General Ledger ----------------------
def build_general_ledger(
    account: AccountRecord,
    transactions: Sequence[JournalEntryRecord],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> GeneralLedger:
    # everything before the window rolls into the opening row
    opening = account.opening_balance or 0.0
    if start is not None:
        opening = get_account_balance(account, [t for t in transactions if t.date < start])

    rows = [GeneralLedgerRow(description="Opening balance", debit=0.0, credit=0.0, balance=opening)]
    running = opening
    debit_normal = is_debit_normal(account)

    # sorted() is stable, so same-day entries keep their order
    for t in sorted(entries_in_period(transactions, start, end), key=lambda t: t.date):
        for line in t.lines:
            if line.account_id != account.id:
                continue
            running += (line.debit - line.credit) if debit_normal else (line.credit - line.debit)
            rows.append(GeneralLedgerRow(
                entry_id=t.id, date=t.date, description=t.description,
                debit=line.debit, credit=line.credit, balance=running,
            ))

    return GeneralLedger(account=account, start=start, end=end, rows=rows, closing_balance=running)


# ---------------------- Dashboard ----------------------
def build_financial_summary(
    accounts: Sequence[AccountRecord],
    transactions: Sequence[JournalEntryRecord],
    start: Optional[date] = None,
    end: Optional[date] = None,
    mapping: Optional[AccountMapping] = None,
) -> FinancialSummary:
    mapping = mapping or AccountMapping()
    total_income = _type_total(accounts, transactions, AccountType.INCOME, start, end)
    total_expenses = _type_total(accounts, transactions, AccountType.EXPENSE, start, end)
    cash_accounts = accounts_named(accounts, mapping.cash, types={AccountType.ASSET})

    return FinancialSummary(
        total_assets=_type_total(accounts, transactions, AccountType.ASSET, start, end),
        total_liabilities=_type_total(accounts, transactions, AccountType.LIABILITY, start, end),
        total_equity=_type_total(accounts, transactions, AccountType.EQUITY, start, end),
        total_income=total_income,
        total_expenses=total_expenses,
        net_income=total_income - total_expenses,
        cash_balance=sum_balances(cash_accounts, transactions, None, end),
    )
