from datetime import date
from typing import Iterable, List, Optional, Sequence

from schemas import (
    AccountRecord,
    AccountType,
    DEBIT_NORMAL,
    JournalEntryRecord,
    ReportOptions,
    TOLERANCE,
)


# ---------------------- Date window ----------------------
def in_period(entry_date: date, start: Optional[date] = None, end: Optional[date] = None) -> bool:
    # both bounds inclusive, None means open-ended
    if start is not None and entry_date < start:
        return False
    if end is not None and entry_date > end:
        return False
    return True


def entries_in_period(transactions: Iterable[JournalEntryRecord], start=None, end=None) -> List[JournalEntryRecord]:
    return [t for t in transactions if in_period(t.date, start, end)]


def is_debit_normal(account: AccountRecord) -> bool:
    return account.type in DEBIT_NORMAL


# ---------------------- Balance Engine ----------------------
def raw_totals(account_id: int, transactions: Iterable[JournalEntryRecord], start=None, end=None):
    """Sum of debits and credits posted to one account inside the window."""
    debit = 0.0
    credit = 0.0
    for t in transactions:
        if not in_period(t.date, start, end):
            continue
        for line in t.lines:
            if line.account_id == account_id:
                debit += line.debit
                credit += line.credit
    return debit, credit


def net_movement(account: AccountRecord, transactions: Iterable[JournalEntryRecord], start=None, end=None) -> float:
    """Activity in the account's normal sign, opening balance excluded."""
    debit, credit = raw_totals(account.id, transactions, start, end)
    if is_debit_normal(account):
        return debit - credit
    return credit - debit


def get_account_balance(
    account: Optional[AccountRecord],
    transactions: Sequence[JournalEntryRecord],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> float:
    if account is None:
        return 0.0
    # opening balance is stored in the normal sign already
    return (account.opening_balance or 0.0) + net_movement(account, transactions, start, end)


def get_account_type_balance(
    transactions: Sequence[JournalEntryRecord],
    accounts: Sequence[AccountRecord],
    type: AccountType,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> float:
    return sum(
        (get_account_balance(acc, transactions, start, end) for acc in accounts if acc.type == type),
        0.0,
    )


def sum_balances(accounts: Iterable[AccountRecord], transactions, start=None, end=None) -> float:
    return sum((get_account_balance(acc, transactions, start, end) for acc in accounts), 0.0)


# ---------------------- Chart lookups ----------------------
def normalize_name(name: str) -> str:
    return " ".join((name or "").split()).lower()


def accounts_named(accounts: Iterable[AccountRecord], names: Iterable[str], types=None) -> List[AccountRecord]:
    """Accounts whose name matches one of ``names`` (case-insensitive, trimmed)."""
    wanted = {normalize_name(n) for n in names}
    return [
        acc for acc in accounts
        if normalize_name(acc.name) in wanted and (types is None or acc.type in types)
    ]


def sorted_by_code(accounts: Iterable[AccountRecord]) -> List[AccountRecord]:
    return sorted(accounts, key=lambda a: a.code)


def is_zero(amount: float) -> bool:
    return abs(amount) < TOLERANCE


# ---------------------- Formatting ----------------------
def format_currency(amount: float, options: Optional[ReportOptions] = None) -> str:
    options = options or ReportOptions()
    formatted = f"{amount * options.exchange_rate:,.2f}"
    if options.show_currency_sign:
        return f"{options.currency_sign} {formatted}"
    return formatted


def format_ratio(value: Optional[float], digits: int = 2) -> str:
    if value is None:
        return "N/A"
    return f"{value:.{digits}f}"


def account_label(account: AccountRecord, options: Optional[ReportOptions] = None) -> str:
    options = options or ReportOptions()
    if options.show_account_codes:
        return f"{account.code} - {account.name}"
    return account.name
