from datetime import date
from typing import List

import uvicorn
from fastapi import FastAPI, Depends, HTTPException, status
from sqlalchemy.orm import Session

from settings import settings
from database import get_db
from logging_setup import configure_logging
from seed import init_db, load_demo_data
from schemas import (
    AccountCreate,
    AccountOut,
    AccountRecord,
    AccountUpdate,
    AgedReceivables,
    BalanceSheet,
    CashFlowStatement,
    FinancialSummary,
    GeneralLedger,
    IncomeStatement,
    JournalEntryIn,
    JournalEntryOut,
    Notification,
    RatioReport,
    TrialBalance,
)
import store
from aging import build_aged_receivables
from cashflow import build_cash_flow_statement
from notifications import build_notifications
from ratios import build_ratio_report
from statements import (
    build_balance_sheet,
    build_financial_summary,
    build_general_ledger,
    build_income_statement,
    build_trial_balance,
)
from utils import get_account_balance

# ---------------------- App ----------------------
app = FastAPI(title=settings.APP_NAME)


# ---------------------- Startup ----------------------
@app.on_event("startup")
def startup():
    configure_logging(settings.LOG_LEVEL)
    init_db()


# ---------------------- Helpers ----------------------
def store_errors(exc: store.LedgerStoreError) -> HTTPException:
    if isinstance(exc, store.NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (store.DuplicateAccountCodeError, store.AccountTypeLockedError, store.AccountInUseError)):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


def _entry_out(entry) -> JournalEntryOut:
    return JournalEntryOut.model_validate(entry)


# ---------------------- Accounts ----------------------
@app.get("/accounts", response_model=List[AccountOut])
def list_accounts(db: Session = Depends(get_db)):
    return store.load_accounts(db)


@app.post("/accounts", response_model=AccountOut, status_code=status.HTTP_201_CREATED)
def create_account(data: AccountCreate, db: Session = Depends(get_db)):
    try:
        return store.create_account(db, data)
    except store.LedgerStoreError as exc:
        raise store_errors(exc)


@app.get("/accounts/{account_id}", response_model=AccountOut)
def get_account(account_id: int, db: Session = Depends(get_db)):
    try:
        return store.get_account(db, account_id)
    except store.LedgerStoreError as exc:
        raise store_errors(exc)


@app.put("/accounts/{account_id}", response_model=AccountOut)
def update_account(account_id: int, data: AccountUpdate, db: Session = Depends(get_db)):
    try:
        return store.update_account(db, account_id, data)
    except store.LedgerStoreError as exc:
        raise store_errors(exc)


@app.delete("/accounts/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(account_id: int, db: Session = Depends(get_db)):
    try:
        store.delete_account(db, account_id)
    except store.LedgerStoreError as exc:
        raise store_errors(exc)


@app.get("/accounts/{account_id}/balance")
def account_balance(account_id: int, start: date | None = None, end: date | None = None, db: Session = Depends(get_db)):
    try:
        account = AccountRecord.model_validate(store.get_account(db, account_id))
    except store.LedgerStoreError as exc:
        raise store_errors(exc)
    balance = get_account_balance(account, store.load_entries(db), start, end)
    return {"account_id": account_id, "start": start, "end": end, "balance": balance}


@app.get("/accounts/{account_id}/ledger", response_model=GeneralLedger)
def account_ledger(account_id: int, start: date | None = None, end: date | None = None, db: Session = Depends(get_db)):
    try:
        account = AccountRecord.model_validate(store.get_account(db, account_id))
    except store.LedgerStoreError as exc:
        raise store_errors(exc)
    return build_general_ledger(account, store.load_entries(db), start, end)


# ---------------------- Entries ----------------------
@app.get("/entries", response_model=List[JournalEntryOut])
def list_entries(db: Session = Depends(get_db)):
    return store.load_entries(db)


@app.post("/entries", response_model=JournalEntryOut, status_code=status.HTTP_201_CREATED)
def create_entry(data: JournalEntryIn, db: Session = Depends(get_db)):
    try:
        return _entry_out(store.create_entry(db, data))
    except store.LedgerStoreError as exc:
        raise store_errors(exc)


@app.get("/entries/{entry_id}", response_model=JournalEntryOut)
def get_entry(entry_id: int, db: Session = Depends(get_db)):
    try:
        return _entry_out(store.get_entry(db, entry_id))
    except store.LedgerStoreError as exc:
        raise store_errors(exc)


@app.put("/entries/{entry_id}", response_model=JournalEntryOut)
def update_entry(entry_id: int, data: JournalEntryIn, db: Session = Depends(get_db)):
    try:
        return _entry_out(store.update_entry(db, entry_id, data))
    except store.LedgerStoreError as exc:
        raise store_errors(exc)


@app.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(entry_id: int, db: Session = Depends(get_db)):
    try:
        store.delete_entry(db, entry_id)
    except store.LedgerStoreError as exc:
        raise store_errors(exc)


# ---------------------- Reports ----------------------
@app.get("/reports/trial-balance", response_model=TrialBalance)
def trial_balance(
    start: date | None = None,
    end: date | None = None,
    show_zero: bool | None = None,
    db: Session = Depends(get_db),
):
    accounts, entries = store.load_snapshot(db)
    return build_trial_balance(accounts, entries, start, end, settings.report_options(show_zero))


@app.get("/reports/income-statement", response_model=IncomeStatement)
def income_statement(
    start: date | None = None,
    end: date | None = None,
    show_zero: bool | None = None,
    db: Session = Depends(get_db),
):
    accounts, entries = store.load_snapshot(db)
    return build_income_statement(accounts, entries, start, end, settings.report_options(show_zero))


@app.get("/reports/balance-sheet", response_model=BalanceSheet)
def balance_sheet(
    start: date | None = None,
    end: date | None = None,
    as_of: date | None = None,
    show_zero: bool | None = None,
    db: Session = Depends(get_db),
):
    accounts, entries = store.load_snapshot(db)
    return build_balance_sheet(accounts, entries, start, end or as_of, settings.report_options(show_zero))


@app.get("/reports/cash-flow", response_model=CashFlowStatement)
def cash_flow(start: date, end: date, db: Session = Depends(get_db)):
    accounts, entries = store.load_snapshot(db)
    try:
        return build_cash_flow_statement(accounts, entries, start, end, settings.account_mapping())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.get("/reports/ratios", response_model=RatioReport)
def ratios(start: date | None = None, end: date | None = None, db: Session = Depends(get_db)):
    accounts, entries = store.load_snapshot(db)
    return build_ratio_report(accounts, entries, start, end, settings.account_mapping())


@app.get("/reports/aged-receivables", response_model=AgedReceivables)
def aged_receivables(as_of: date | None = None, db: Session = Depends(get_db)):
    accounts, entries = store.load_snapshot(db)
    return build_aged_receivables(accounts, entries, as_of or date.today(), settings.account_mapping())


@app.get("/reports/summary", response_model=FinancialSummary)
def summary(start: date | None = None, end: date | None = None, db: Session = Depends(get_db)):
    accounts, entries = store.load_snapshot(db)
    return build_financial_summary(accounts, entries, start, end, settings.account_mapping())


@app.get("/notifications", response_model=List[Notification])
def notifications(today: date | None = None, db: Session = Depends(get_db)):
    accounts, entries = store.load_snapshot(db)
    return build_notifications(
        accounts,
        entries,
        today or date.today(),
        due_soon_days=settings.DUE_SOON_DAYS,
        low_stock_threshold=settings.LOW_STOCK_THRESHOLD,
        mapping=settings.account_mapping(),
        options=settings.report_options(),
    )


# ---------------------- Demo ----------------------
@app.post("/demo", response_model=JournalEntryOut, status_code=status.HTTP_201_CREATED)
def demo(db: Session = Depends(get_db)):
    return _entry_out(load_demo_data(db))


def run():
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
