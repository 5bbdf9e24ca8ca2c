"""
Ledger Store access.

The reports never touch the database. They get a snapshot of plain records
from ``load_snapshot``; every write goes through the guarded functions here.
"""
from typing import List, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from logging_setup import get_logger
from models import Account, JournalEntry, JournalLine
from schemas import (
    AccountCreate,
    AccountRecord,
    AccountUpdate,
    JournalEntryIn,
    JournalEntryRecord,
)

log = get_logger("ledger.store")


# ---------------------- Errors ----------------------
class LedgerStoreError(Exception):
    pass


class NotFoundError(LedgerStoreError):
    pass


class UnknownAccountError(LedgerStoreError):
    pass


class DuplicateAccountCodeError(LedgerStoreError):
    pass


class AccountTypeLockedError(LedgerStoreError):
    pass


class AccountInUseError(LedgerStoreError):
    pass


# ---------------------- Snapshot ----------------------
def load_accounts(db: Session) -> List[AccountRecord]:
    rows = db.execute(select(Account).order_by(Account.code)).scalars().all()
    return [AccountRecord.model_validate(r) for r in rows]


def load_entries(db: Session) -> List[JournalEntryRecord]:
    rows = db.execute(
        select(JournalEntry)
        .options(selectinload(JournalEntry.lines))
        .order_by(JournalEntry.date, JournalEntry.id)
    ).scalars().all()
    return [JournalEntryRecord.model_validate(r) for r in rows]


def load_snapshot(db: Session) -> Tuple[List[AccountRecord], List[JournalEntryRecord]]:
    return load_accounts(db), load_entries(db)


# ---------------------- Accounts ----------------------
def get_account(db: Session, account_id: int) -> Account:
    acc = db.get(Account, account_id)
    if not acc:
        raise NotFoundError(f"Account {account_id} not found")
    return acc


def _is_referenced(db: Session, account_id: int) -> bool:
    return db.execute(
        select(JournalLine.id).where(JournalLine.account_id == account_id).limit(1)
    ).first() is not None


def _check_code_free(db: Session, code: str, account_id=None):
    other = db.execute(select(Account).where(Account.code == code)).scalars().first()
    if other and other.id != account_id:
        log.warning("rejected account code %s: already used by account %s", code, other.id)
        raise DuplicateAccountCodeError(f"Account code {code} already exists")


def create_account(db: Session, data: AccountCreate) -> Account:
    _check_code_free(db, data.code)
    acc = Account(
        code=data.code,
        name=data.name,
        type=data.type,
        subtype=data.subtype,
        description=data.description.strip(),
        opening_balance=data.opening_balance,
    )
    db.add(acc)
    db.commit()
    db.refresh(acc)
    log.info("created account %s %s (%s)", acc.code, acc.name, acc.type.value)
    return acc


def update_account(db: Session, account_id: int, data: AccountUpdate) -> Account:
    acc = get_account(db, account_id)
    _check_code_free(db, data.code, account_id)
    # a new type would flip the sign of every historic balance
    if data.type != acc.type and _is_referenced(db, account_id):
        log.warning("rejected type change of account %s: it has postings", acc.code)
        raise AccountTypeLockedError(
            f"Account {acc.code} has journal lines; its type cannot change"
        )
    acc.code = data.code
    acc.name = data.name
    acc.type = data.type
    acc.subtype = data.subtype
    acc.description = data.description.strip()
    acc.opening_balance = data.opening_balance
    db.commit()
    db.refresh(acc)
    log.info("updated account %s", acc.code)
    return acc


def delete_account(db: Session, account_id: int) -> None:
    acc = get_account(db, account_id)
    if _is_referenced(db, account_id):
        log.warning("rejected delete of account %s: it has postings", acc.code)
        raise AccountInUseError(f"Account {acc.code} has journal lines and cannot be deleted")
    code = acc.code
    db.delete(acc)
    db.commit()
    log.info("deleted account %s", code)


# ---------------------- Journal entries ----------------------
def get_entry(db: Session, entry_id: int) -> JournalEntry:
    entry = db.get(JournalEntry, entry_id)
    if not entry:
        raise NotFoundError(f"Entry {entry_id} not found")
    return entry


def _check_accounts_exist(db: Session, data: JournalEntryIn):
    wanted = {l.account_id for l in data.lines}
    found = set(db.execute(select(Account.id).where(Account.id.in_(wanted))).scalars().all())
    missing = sorted(wanted - found)
    if missing:
        log.warning("rejected entry dated %s: unknown accounts %s", data.date, missing)
        raise UnknownAccountError(f"Unknown account id(s): {', '.join(map(str, missing))}")


def _build_lines(data: JournalEntryIn) -> List[JournalLine]:
    return [
        JournalLine(account_id=l.account_id, position=i, debit=l.debit, credit=l.credit)
        for i, l in enumerate(data.lines)
    ]


def create_entry(db: Session, data: JournalEntryIn) -> JournalEntry:
    # JournalEntryIn has already rejected unbalanced entries
    _check_accounts_exist(db, data)
    entry = JournalEntry(
        date=data.date,
        due_date=data.due_date,
        description=data.description.strip(),
        contact=data.contact,
        lines=_build_lines(data),
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    log.info("posted entry %s on %s (%s)", entry.id, entry.date, entry.description)
    return entry


def update_entry(db: Session, entry_id: int, data: JournalEntryIn) -> JournalEntry:
    entry = get_entry(db, entry_id)
    _check_accounts_exist(db, data)
    entry.date = data.date
    entry.due_date = data.due_date
    entry.description = data.description.strip()
    entry.contact = data.contact
    entry.lines = _build_lines(data)
    db.commit()
    db.refresh(entry)
    log.info("updated entry %s", entry.id)
    return entry


def delete_entry(db: Session, entry_id: int) -> None:
    entry = get_entry(db, entry_id)
    db.delete(entry)
    db.commit()
    log.info("deleted entry %s", entry_id)
