from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Numeric, Enum
from sqlalchemy.orm import relationship, Mapped, mapped_column
import datetime as dt
from typing import Optional
from database import Base
from schemas import AccountType

# ----------------------
# Accounts & Journal
# ----------------------
class Account(Base):
    __tablename__ = "accounts"
    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    type = Column(Enum(AccountType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    subtype = Column(String, nullable=True)  # CURRENT_ASSET, NON_CURRENT_ASSET, CURRENT_LIABILITY, ...
    description = Column(String, nullable=False, default="")
    # Stored in the account's normal-balance sign
    opening_balance = Column(Numeric(14, 2), nullable=False, default=0)

    lines = relationship("JournalLine", back_populates="account")

class JournalEntry(Base):
    __tablename__ = "journal_entries"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    due_date: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    description: Mapped[str] = mapped_column(String(255), default="")
    contact: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=dt.datetime.utcnow)

    lines = relationship(
        "JournalLine",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalLine.position",
    )

class JournalLine(Base):
    __tablename__ = "journal_lines"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    entry_id: Mapped[int] = mapped_column(ForeignKey("journal_entries.id", ondelete="CASCADE"))
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id", ondelete="RESTRICT"))
    position: Mapped[int] = mapped_column(Integer, default=0)  # keeps the entry's line order
    debit: Mapped[float] = mapped_column(Numeric(14, 2), default=0)
    credit: Mapped[float] = mapped_column(Numeric(14, 2), default=0)

    entry = relationship("JournalEntry", back_populates="lines")
    account = relationship("Account", back_populates="lines")
