from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, Integer, JSON, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class CashCountRecord(Base):
    __tablename__ = "cash_count_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Not unique: replaying a batch appends the same submission again.
    submission_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    store: Mapped[str] = mapped_column(String(120), index=True, nullable=False)
    operator: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    date: Mapped[str] = mapped_column(String(32), nullable=False)
    time: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    totals: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    denominations: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    total_checked: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    discrepancy: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    checked_counts: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, nullable=False)
    checked_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


class SafeOwedBalance(Base):
    __tablename__ = "safe_owed_balances"
    __table_args__ = (UniqueConstraint("store", "denomination_id", name="uq_safe_owed_store_denomination"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    store: Mapped[str] = mapped_column(String(120), index=True, nullable=False)
    denomination_id: Mapped[str] = mapped_column(String(16), nullable=False)
    units: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class SafeTopUp(Base):
    __tablename__ = "safe_topups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    store: Mapped[str] = mapped_column(String(120), index=True, nullable=False)
    operator: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    date: Mapped[str] = mapped_column(String(32), nullable=False)
    time: Mapped[str] = mapped_column(String(64), nullable=False)
    units: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, nullable=False)
