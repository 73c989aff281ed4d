from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class TradeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    member_id: int
    ticker: str
    asset_name: str | None
    transaction_type: str
    transaction_date: date
    disclosure_date: date | None
    amount_range: str
    amount_min: int
    amount_max: int
    created_at: datetime


class LegislatorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    state: str
    party: str | None
    chamber: str | None
    image_url: str | None
    created_at: datetime
    total_trades: int = 0
    total_purchases: int = 0
    total_sales: int = 0
    latest_trade_date: date | None = None


class TickerCount(BaseModel):
    ticker: str
    count: int


class LegislatorDetailOut(LegislatorOut):
    top_tickers: list[TickerCount] = []
    trades: list[TradeOut] = []


class SyncCounts(BaseModel):
    legislators_created: int
    trades_created: int
    records_processed: int = 0
    records_skipped: int = 0


class SyncResponse(BaseModel):
    status: str
    message: str
    timestamp: datetime
    result: SyncCounts | None = None


class MetaOut(BaseModel):
    last_sync_time: datetime | None
    number_of_trades: int
    number_of_legislators: int
