from datetime import date

from database import Base, engine, SessionLocal
from logging_setup import get_logger
from models import Account, JournalEntry, JournalLine
from schemas import AccountType
from sqlalchemy.orm import Session

log = get_logger("ledger.seed")

DEFAULT_ACCOUNTS = [
    ("10000", "Cash", AccountType.ASSET, "CURRENT_ASSET"),
    ("10100", "Accounts Receivable", AccountType.ASSET, "CURRENT_ASSET"),
    ("10200", "Inventory", AccountType.ASSET, "CURRENT_ASSET"),
    ("10300", "Bank", AccountType.ASSET, "CURRENT_ASSET"),
    ("20000", "Accounts Payable", AccountType.LIABILITY, "CURRENT_LIABILITY"),
    ("20100", "Sales Tax Payable", AccountType.LIABILITY, "CURRENT_LIABILITY"),
    ("30000", "Owner's Equity", AccountType.EQUITY, None),
    ("40000", "Sales Revenue", AccountType.INCOME, None),
    ("40100", "Service Revenue", AccountType.INCOME, None),
    ("50000", "Cost of Goods Sold", AccountType.EXPENSE, None),
    ("50100", "Rent", AccountType.EXPENSE, None),
    ("50200", "Utilities", AccountType.EXPENSE, None),
    ("50300", "Salaries", AccountType.EXPENSE, None),
]

DEMO_INVESTMENT = 150000


def seed_accounts(session: Session):
    for code, name, typ, subtype in DEFAULT_ACCOUNTS:
        if not session.query(Account).filter_by(code=code).first():
            session.add(Account(code=code, name=name, type=typ, subtype=subtype, description=""))


def load_demo_data(session: Session, on: date | None = None) -> JournalEntry:
    """Default chart plus the owner's initial investment into the bank."""
    seed_accounts(session)
    session.flush()
    bank = session.query(Account).filter_by(code="10300").one()
    equity = session.query(Account).filter_by(code="30000").one()

    entry = JournalEntry(
        date=on or date.today(),
        description="Initial Owner Investment",
        lines=[
            JournalLine(account_id=bank.id, position=0, debit=DEMO_INVESTMENT, credit=0),
            JournalLine(account_id=equity.id, position=1, debit=0, credit=DEMO_INVESTMENT),
        ],
    )
    session.add(entry)
    session.commit()
    log.info("loaded demo data (entry %s)", entry.id)
    return entry


def init_db(bind=None):
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    session = SessionLocal(bind=bind)
    try:
        seed_accounts(session)
        session.commit()
    finally:
        session.close()


if __name__ == "__main__":
    init_db()
