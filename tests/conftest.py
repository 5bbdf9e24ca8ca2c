"""Shared fixtures: record builders for the pure reports and an in-memory
database for the store and the HTTP app."""

import itertools
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, enable_sqlite_foreign_keys, get_db
from schemas import AccountRecord, AccountType, JournalEntryRecord, JournalLineRecord
from seed import seed_accounts

_ids = itertools.count(1)


def make_account(id, code, name, type, opening_balance=0.0, subtype=None):
    return AccountRecord(
        id=id, code=code, name=name, type=type,
        subtype=subtype, opening_balance=opening_balance,
    )


def make_entry(on, lines, description="", contact=None, due_date=None, id=None):
    """``lines`` is a list of (account_id, debit, credit)."""
    return JournalEntryRecord(
        id=id if id is not None else next(_ids),
        date=on,
        due_date=due_date,
        description=description,
        contact=contact,
        lines=[JournalLineRecord(account_id=a, debit=d, credit=c) for a, d, c in lines],
    )


CASH, AR, INVENTORY, BANK, EQUIPMENT = 1, 2, 3, 4, 5
AP, TAX, LOAN = 6, 7, 8
EQUITY = 9
SALES, SERVICE = 10, 11
COGS, RENT = 12, 13


def build_chart():
    return [
        make_account(CASH, "10000", "Cash", AccountType.ASSET, subtype="CURRENT_ASSET"),
        make_account(AR, "10100", "Accounts Receivable", AccountType.ASSET, subtype="CURRENT_ASSET"),
        make_account(INVENTORY, "10200", "Inventory", AccountType.ASSET, subtype="CURRENT_ASSET"),
        make_account(BANK, "10300", "Bank", AccountType.ASSET, subtype="CURRENT_ASSET"),
        make_account(EQUIPMENT, "15000", "Equipment", AccountType.ASSET, subtype="NON_CURRENT_ASSET"),
        make_account(AP, "20000", "Accounts Payable", AccountType.LIABILITY, subtype="CURRENT_LIABILITY"),
        make_account(TAX, "20100", "Sales Tax Payable", AccountType.LIABILITY, subtype="CURRENT_LIABILITY"),
        make_account(LOAN, "25000", "Bank Loan", AccountType.LIABILITY, subtype="NON_CURRENT_LIABILITY"),
        make_account(EQUITY, "30000", "Owner's Equity", AccountType.EQUITY),
        make_account(SALES, "40000", "Sales Revenue", AccountType.INCOME),
        make_account(SERVICE, "40100", "Service Revenue", AccountType.INCOME),
        make_account(COGS, "50000", "Cost of Goods Sold", AccountType.EXPENSE),
        make_account(RENT, "50100", "Rent", AccountType.EXPENSE),
    ]


@pytest.fixture
def chart():
    return build_chart()


@pytest.fixture
def journal():
    """A small but complete quarter of trading."""
    return [
        make_entry(date(2024, 1, 1), [(BANK, 10000, 0), (EQUITY, 0, 10000)], "Owner investment"),
        make_entry(date(2024, 1, 5), [(LOAN, 0, 5000), (BANK, 5000, 0)], "Loan from bank"),
        make_entry(date(2024, 1, 10), [(EQUIPMENT, 4000, 0), (BANK, 0, 4000)], "Equipment purchase"),
        make_entry(date(2024, 1, 15), [(INVENTORY, 3000, 0), (AP, 0, 3000)], "Stock on credit from Supplier"),
        make_entry(date(2024, 2, 1), [(AR, 2200, 0), (SALES, 0, 2000), (TAX, 0, 200)], "Invoice to Acme"),
        make_entry(date(2024, 2, 1), [(COGS, 1200, 0), (INVENTORY, 0, 1200)], "Cost of Acme sale"),
        make_entry(date(2024, 2, 20), [(BANK, 1500, 0), (AR, 0, 1500)], "Payment from Acme"),
        make_entry(date(2024, 3, 1), [(RENT, 800, 0), (CASH, 0, 800)], "March rent"),
        make_entry(date(2024, 3, 10), [(AP, 1000, 0), (BANK, 0, 1000)], "Pay supplier"),
        make_entry(date(2024, 3, 15), [(CASH, 600, 0), (SERVICE, 0, 600)], "Consulting for Beta"),
    ]


# ---------------------- Database ----------------------
@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(eng)
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    seed_accounts(session)
    session.commit()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine, db):
    from main import app

    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = Session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
