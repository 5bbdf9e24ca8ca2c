from typing import List
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from schemas import AccountMapping, ReportOptions

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "ProLedger"

    # Read DATABASE_URL from environment or .env, fall back to a local sqlite file
    DATABASE_URL: str = "sqlite:///./ledger.db"

    LOG_LEVEL: str = "INFO"
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Presentation
    CURRENCY: str = "USD"
    CURRENCY_SIGN: str = "$"
    SHOW_CURRENCY_SIGN: bool = True
    EXCHANGE_RATE: float = 1.0
    SHOW_ZERO_BALANCES: bool = False
    SHOW_ACCOUNT_CODES: bool = True

    # Chart-of-accounts mapping (account names, case-insensitive)
    CASH_ACCOUNTS: List[str] = ["Cash", "Bank"]
    RECEIVABLE_ACCOUNTS: List[str] = ["Accounts Receivable"]
    INVENTORY_ACCOUNTS: List[str] = ["Inventory"]
    PAYABLE_ACCOUNTS: List[str] = ["Accounts Payable", "Sales Tax Payable"]
    COGS_ACCOUNTS: List[str] = ["Cost of Goods Sold"]

    # Alerts
    LOW_STOCK_THRESHOLD: float = 1000.0
    DUE_SOON_DAYS: int = 3

    @field_validator("DATABASE_URL")
    @classmethod
    def postgresql_scheme(cls, v: str) -> str:
        # SQLAlchemy only understands the "postgresql://" scheme
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    def report_options(self, show_zero_balances: bool | None = None) -> ReportOptions:
        return ReportOptions(
            show_zero_balances=self.SHOW_ZERO_BALANCES if show_zero_balances is None else show_zero_balances,
            show_account_codes=self.SHOW_ACCOUNT_CODES,
            currency_sign=self.CURRENCY_SIGN,
            show_currency_sign=self.SHOW_CURRENCY_SIGN,
            exchange_rate=self.EXCHANGE_RATE,
        )

    def account_mapping(self) -> AccountMapping:
        return AccountMapping(
            cash=self.CASH_ACCOUNTS,
            receivable=self.RECEIVABLE_ACCOUNTS,
            inventory=self.INVENTORY_ACCOUNTS,
            payable=self.PAYABLE_ACCOUNTS,
            cogs=self.COGS_ACCOUNTS,
        )

settings = Settings()
