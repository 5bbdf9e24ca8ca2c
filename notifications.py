from datetime import date
from typing import List, Optional, Sequence

from schemas import (
    AccountMapping,
    AccountRecord,
    AccountType,
    JournalEntryRecord,
    Notification,
    ReportOptions,
)
from utils import accounts_named, format_currency, sum_balances


def due_soon(transactions: Sequence[JournalEntryRecord], today: date, days: int = 3) -> List[Notification]:
    notes = []
    for t in transactions:
        if t.due_date is None:
            continue
        remaining = (t.due_date - today).days
        if 0 <= remaining <= days:
            notes.append(Notification(
                id=f"due-{t.id}",
                message=f"Bill due soon: {t.description} ({t.due_date.isoformat()})",
                date=today,
            ))
    return notes


def low_inventory(
    accounts: Sequence[AccountRecord],
    transactions: Sequence[JournalEntryRecord],
    today: date,
    threshold: float,
    mapping: AccountMapping,
    options: ReportOptions,
) -> List[Notification]:
    inventory = accounts_named(accounts, mapping.inventory, types={AccountType.ASSET})
    if not inventory:
        return []
    balance = sum_balances(inventory, transactions, None, today)
    if balance >= threshold:
        return []
    return [Notification(
        id=f"stock-{today.isoformat()}",
        message=(
            f"Low inventory value: {format_currency(balance, options)} "
            f"(threshold {format_currency(threshold, options)})"
        ),
        date=today,
    )]


def build_notifications(
    accounts: Sequence[AccountRecord],
    transactions: Sequence[JournalEntryRecord],
    today: date,
    due_soon_days: int = 3,
    low_stock_threshold: float = 1000.0,
    mapping: Optional[AccountMapping] = None,
    options: Optional[ReportOptions] = None,
) -> List[Notification]:
    mapping = mapping or AccountMapping()
    options = options or ReportOptions()
    notes = due_soon(transactions, today, due_soon_days)
    notes += low_inventory(accounts, transactions, today, low_stock_threshold, mapping, options)

    # ids are stable, so a repeated call never yields duplicates
    seen = set()
    unique = []
    for n in notes:
        if n.id not in seen:
            seen.add(n.id)
            unique.append(n)
    return unique
