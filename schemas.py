from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from datetime import date
from datetime import date as _date
from typing import Dict, List, Optional
import enum

# Amounts closer than this are treated as equal (one cent)
TOLERANCE = 0.01


# ----------------------
# Account Type Enum
# ----------------------
class AccountType(str, enum.Enum):
    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    INCOME = "Income"
    EXPENSE = "Expense"


# Normal balance: debit for ASSET/EXPENSE, credit for the rest
DEBIT_NORMAL = {AccountType.ASSET, AccountType.EXPENSE}

ACCOUNT_SUBTYPES = {"CURRENT_ASSET", "NON_CURRENT_ASSET", "CURRENT_LIABILITY", "NON_CURRENT_LIABILITY"}


# ---------------------- Configuration ----------------------
class ReportOptions(BaseModel):
    """Presentation switches. Never changes the arithmetic."""
    model_config = ConfigDict(frozen=True)

    show_zero_balances: bool = False
    show_account_codes: bool = True
    currency_sign: str = "$"
    show_currency_sign: bool = True
    exchange_rate: float = Field(default=1.0, gt=0)


class AccountMapping(BaseModel):
    """Which accounts of the chart play a special role, by name."""
    model_config = ConfigDict(frozen=True)

    cash: List[str] = ["Cash", "Bank"]
    receivable: List[str] = ["Accounts Receivable"]
    inventory: List[str] = ["Inventory"]
    payable: List[str] = ["Accounts Payable", "Sales Tax Payable"]
    cogs: List[str] = ["Cost of Goods Sold"]

    @field_validator("cash", "receivable", "inventory", "payable", "cogs")
    @classmethod
    def normalize_names(cls, names: List[str]) -> List[str]:
        return [" ".join(n.split()).lower() for n in names if n and n.strip()]


# ---------------------- Ledger Store input ----------------------
class AccountCreate(BaseModel):
    code: str
    name: str
    type: AccountType
    subtype: Optional[str] = None
    description: str = ""
    opening_balance: float = 0.0

    @field_validator("code", "name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("subtype")
    @classmethod
    def known_subtype(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        v = v.strip().upper()
        if v not in ACCOUNT_SUBTYPES:
            raise ValueError(f"unknown subtype {v}")
        return v

    @model_validator(mode="after")
    def subtype_fits_type(self):
        if self.subtype is not None:
            if self.type not in (AccountType.ASSET, AccountType.LIABILITY):
                raise ValueError(f"{self.type.value} accounts take no subtype")
            if not self.subtype.endswith("_" + self.type.value.upper()):
                raise ValueError(f"subtype {self.subtype} does not fit a {self.type.value} account")
        return self

    @model_validator(mode="after")
    def no_opening_on_results(self):
        # income and expense start every period at zero
        if self.type in (AccountType.INCOME, AccountType.EXPENSE) and abs(self.opening_balance) >= TOLERANCE:
            raise ValueError(f"{self.type.value} accounts cannot carry an opening balance")
        return self


class AccountUpdate(AccountCreate):
    pass


class AccountOut(BaseModel):
    id: int
    code: str
    name: str
    type: AccountType
    subtype: Optional[str] = None
    description: str
    opening_balance: float

    model_config = ConfigDict(from_attributes=True)


class JournalLineIn(BaseModel):
    account_id: int
    debit: float = Field(default=0.0, ge=0)
    credit: float = Field(default=0.0, ge=0)


class JournalEntryIn(BaseModel):
    date: date
    due_date: Optional[date] = None
    description: str = ""
    contact: Optional[str] = None
    lines: List[JournalLineIn]

    @model_validator(mode="after")
    def check_balanced(self):
        if not self.lines:
            raise ValueError("a journal entry needs at least one line")
        total_debit = sum(l.debit for l in self.lines)
        total_credit = sum(l.credit for l in self.lines)
        if abs(total_debit - total_credit) > TOLERANCE:
            raise ValueError(
                f"entry is not balanced: debits {total_debit:.2f} != credits {total_credit:.2f}"
            )
        return self


# ---------------------- Read-only records handed to the core ----------------------
class AccountRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    code: str
    name: str
    type: AccountType
    subtype: Optional[str] = None
    description: str = ""
    opening_balance: float = 0.0


class JournalLineRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    account_id: int
    debit: float = 0.0
    credit: float = 0.0


class JournalEntryRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    date: date
    due_date: Optional[date] = None
    description: str = ""
    contact: Optional[str] = None
    lines: List[JournalLineRecord] = []


class JournalEntryOut(JournalEntryRecord):
    pass


# ---------------------- Reports ----------------------
class TrialBalanceRow(BaseModel):
    account_id: int
    code: str
    name: str
    type: AccountType
    debit: float
    credit: float
    net: float
    display_debit: float
    display_credit: float


class TrialBalance(BaseModel):
    start: Optional[date] = None
    end: Optional[date] = None
    rows: List[TrialBalanceRow]
    total_debit: float
    total_credit: float
    difference: float
    is_balanced: bool


class StatementLine(BaseModel):
    account_id: int
    code: str
    name: str
    label: str
    balance: float


class IncomeStatement(BaseModel):
    start: Optional[date] = None
    end: Optional[date] = None
    revenue_lines: List[StatementLine]
    expense_lines: List[StatementLine]
    total_revenue: float
    total_expense: float
    net_income: float


class BalanceSheet(BaseModel):
    start: Optional[date] = None
    end: Optional[date] = None
    assets: List[StatementLine]
    liabilities: List[StatementLine]
    equity: List[StatementLine]
    total_assets: float
    total_liabilities: float
    total_equity: float
    net_income: float
    total_liabilities_and_equity: float
    difference: float
    is_balanced: bool


class GeneralLedgerRow(BaseModel):
    entry_id: Optional[int] = None
    date: Optional[_date] = None
    description: str
    debit: float
    credit: float
    balance: float


class GeneralLedger(BaseModel):
    account: AccountRecord
    start: Optional[date] = None
    end: Optional[date] = None
    rows: List[GeneralLedgerRow]
    closing_balance: float


class FinancialSummary(BaseModel):
    total_assets: float
    total_liabilities: float
    total_equity: float
    total_income: float
    total_expenses: float
    net_income: float
    cash_balance: float


class WorkingCapitalLine(BaseModel):
    account_id: int
    name: str
    type: AccountType
    start_balance: float
    end_balance: float
    change: float
    cash_effect: float


class CashFlowLine(BaseModel):
    account_id: int
    name: str
    amount: float


class OperatingActivities(BaseModel):
    net_income: float
    adjustments: List[WorkingCapitalLine]
    total_working_capital_change: float
    total: float


class CashFlowSection(BaseModel):
    lines: List[CashFlowLine]
    total: float


class Reconciliation(BaseModel):
    expected_ending_cash: float
    difference: float
    is_reconciled: bool


class CashFlowStatement(BaseModel):
    start: date
    end: date
    operating: OperatingActivities
    investing: CashFlowSection
    financing: CashFlowSection
    net_cash_flow: float
    beginning_cash: float
    ending_cash: float
    reconciliation: Reconciliation


class RatioInputs(BaseModel):
    current_assets: float
    current_liabilities: float
    inventory: float
    total_assets: float
    total_liabilities: float
    total_equity: float
    revenue: float
    cogs: float
    net_income: float


class RatioReport(BaseModel):
    start: Optional[date] = None
    end: Optional[date] = None
    inputs: RatioInputs
    # None means the denominator was zero
    ratios: Dict[str, Optional[float]]


class AgingBuckets(BaseModel):
    current: float = 0.0
    days_1_30: float = 0.0
    days_31_60: float = 0.0
    days_61_90: float = 0.0
    days_over_90: float = 0.0

    @property
    def total(self) -> float:
        return self.current + self.days_1_30 + self.days_31_60 + self.days_61_90 + self.days_over_90


class AgedInvoice(BaseModel):
    entry_id: int
    date: date
    amount: float
    remaining: float
    age_days: int
    bucket: Optional[str] = None


class CustomerAging(BaseModel):
    customer: str
    buckets: AgingBuckets
    total: float
    unapplied_credit: float
    invoices: List[AgedInvoice]


class AgedReceivables(BaseModel):
    report_date: date
    customers: List[CustomerAging]
    totals: AgingBuckets
    total: float


class Notification(BaseModel):
    id: str
    type: str = "warning"
    message: str
    date: date
    read: bool = False

