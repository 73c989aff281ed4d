from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base

TRANSACTION_TYPES = ("purchase", "sale")


class Legislator(Base):
    __tablename__ = "congress_members"
    __table_args__ = (UniqueConstraint("full_name", "state", name="uq_member_name_state"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    full_name: Mapped[str] = mapped_column(String(200), index=True)
    state: Mapped[str] = mapped_column(String(10))
    party: Mapped[str | None] = mapped_column(String(50))
    chamber: Mapped[str | None] = mapped_column(String(50))
    image_url: Mapped[str | None] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    trades: Mapped[list[Trade]] = relationship("Trade", back_populates="member")


class Trade(Base):
    __tablename__ = "trades"
    __table_args__ = (
        UniqueConstraint("member_id", "ticker", "transaction_date", name="uq_trade_dedup"),
        CheckConstraint(
            "transaction_type IN ('purchase', 'sale')", name="ck_trade_transaction_type"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    member_id: Mapped[int] = mapped_column(ForeignKey("congress_members.id"), index=True)
    ticker: Mapped[str] = mapped_column(String(20), index=True)
    asset_name: Mapped[str | None] = mapped_column(String(300))
    transaction_type: Mapped[str] = mapped_column(String(20), index=True)
    transaction_date: Mapped[date] = mapped_column(Date, index=True)
    disclosure_date: Mapped[date | None] = mapped_column(Date)
    amount_range: Mapped[str] = mapped_column(Text)
    amount_min: Mapped[int] = mapped_column(Integer, default=0)
    amount_max: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    member: Mapped[Legislator] = relationship("Legislator", back_populates="trades")


class SyncLog(Base):
    __tablename__ = "sync_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    run_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    legislators_created: Mapped[int] = mapped_column(Integer, default=0)
    trades_created: Mapped[int] = mapped_column(Integer, default=0)
