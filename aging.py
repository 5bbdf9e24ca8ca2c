"""
Aged receivables.

Invoices and payments are matched per customer, oldest invoice first. Ledger
lines carry no customer reference, so the customer is taken from the entry's
``contact`` when there is one and otherwise guessed from the description
("Invoice to Acme", "Payment from Acme"). Anything the guess cannot place
lands under ``UNKNOWN_CUSTOMER``.
"""
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence

from logging_setup import get_logger
from schemas import (
    AccountMapping,
    AccountRecord,
    AccountType,
    AgedInvoice,
    AgedReceivables,
    AgingBuckets,
    CustomerAging,
    JournalEntryRecord,
    TOLERANCE,
)
from utils import accounts_named

log = get_logger("ledger.aging")

UNKNOWN_CUSTOMER = "Unknown Customer"

# text after the keyword, up to the next keyword or punctuation
_NAME_END = r"(?=\s+(?:to|from|for)\b|\s*[,;:()]|\s+-\s|$)"

# "for" is tried only when no "to" / "from" name is found
CUSTOMER_PATTERNS = (
    re.compile(r"\b(?:to|from)\s+(?P<name>.+?)" + _NAME_END, re.IGNORECASE),
    re.compile(r"\bfor\s+(?P<name>.+?)" + _NAME_END, re.IGNORECASE),
)

BUCKETS = ("current", "days_1_30", "days_31_60", "days_61_90", "days_over_90")


def customer_from_description(description: str) -> Optional[str]:
    for pattern in CUSTOMER_PATTERNS:
        match = pattern.search(description or "")
        if match:
            name = " ".join(match.group("name").split()).strip(" .")
            if name:
                return name
    return None


def identify_customer(entry: JournalEntryRecord) -> str:
    if entry.contact and entry.contact.strip():
        return " ".join(entry.contact.split())
    return customer_from_description(entry.description) or UNKNOWN_CUSTOMER


def bucket_for(age_days: int) -> str:
    if age_days < 1:
        return "current"
    if age_days <= 30:
        return "days_1_30"
    if age_days <= 60:
        return "days_31_60"
    if age_days <= 90:
        return "days_61_90"
    return "days_over_90"


@dataclass
class OpenInvoice:
    entry_id: int
    date: date
    amount: float
    remaining: float


@dataclass
class CustomerLedger:
    name: str
    invoices: List[OpenInvoice] = field(default_factory=list)
    unapplied_credit: float = 0.0

    def invoice(self, entry: JournalEntryRecord, amount: float):
        self.invoices.append(OpenInvoice(entry.id, entry.date, amount, amount))

    def apply_payment(self, amount: float):
        """FIFO: retire the oldest open invoice before touching a newer one."""
        for inv in self.invoices:
            if amount <= 0:
                break
            applied = min(inv.remaining, amount)
            inv.remaining -= applied
            amount -= applied
        if amount > TOLERANCE:
            # kept for display only, never applied to later invoices
            self.unapplied_credit += amount


def match_receivables(
    receivable_ids: set, transactions: Sequence[JournalEntryRecord], report_date: date
) -> Dict[str, CustomerLedger]:
    touching = [
        t for t in transactions
        if t.date <= report_date and any(l.account_id in receivable_ids for l in t.lines)
    ]
    # stable sort keeps same-day entries in input order
    touching.sort(key=lambda t: t.date)

    customers: Dict[str, CustomerLedger] = {}
    for t in touching:
        name = identify_customer(t)
        ledger = customers.setdefault(name.lower(), CustomerLedger(name))
        for line in t.lines:
            if line.account_id not in receivable_ids:
                continue
            if line.debit > 0:
                ledger.invoice(t, line.debit)
            if line.credit > 0:
                ledger.apply_payment(line.credit)
    return customers


def build_aged_receivables(
    accounts: Sequence[AccountRecord],
    transactions: Sequence[JournalEntryRecord],
    report_date: date,
    mapping: Optional[AccountMapping] = None,
) -> AgedReceivables:
    mapping = mapping or AccountMapping()
    receivables = accounts_named(accounts, mapping.receivable, types={AccountType.ASSET})
    if not receivables:
        log.info("no receivable account in the chart; aged receivables is empty")
        return AgedReceivables(report_date=report_date, customers=[], totals=AgingBuckets(), total=0.0)

    ledgers = match_receivables({a.id for a in receivables}, transactions, report_date)

    totals = AgingBuckets()
    rows = []
    for key in sorted(ledgers, key=lambda k: (ledgers[k].name == UNKNOWN_CUSTOMER, k)):
        ledger = ledgers[key]
        buckets = AgingBuckets()
        invoices = []
        for inv in ledger.invoices:
            age = (report_date - inv.date).days
            bucket = None
            if inv.remaining > TOLERANCE:
                bucket = bucket_for(age)
                setattr(buckets, bucket, getattr(buckets, bucket) + inv.remaining)
            invoices.append(AgedInvoice(
                entry_id=inv.entry_id, date=inv.date, amount=inv.amount,
                remaining=inv.remaining, age_days=age, bucket=bucket,
            ))
        for name in BUCKETS:
            setattr(totals, name, getattr(totals, name) + getattr(buckets, name))
        rows.append(CustomerAging(
            customer=ledger.name,
            buckets=buckets,
            total=buckets.total,
            unapplied_credit=ledger.unapplied_credit,
            invoices=invoices,
        ))

    return AgedReceivables(report_date=report_date, customers=rows, totals=totals, total=totals.total)
