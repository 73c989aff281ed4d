from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import case, func
from sqlalchemy.orm import Session

from app.config import get_settings
from app.db import SessionLocal, init_db
from app.logging_config import setup_logging
from app.models import Legislator, SyncLog, Trade
from app.schemas import (
    LegislatorDetailOut,
    LegislatorOut,
    MetaOut,
    SyncCounts,
    SyncResponse,
    TickerCount,
    TradeOut,
)
from app.services.sources.base import TradeSource
from app.services.sources.provider_stub import HouseDisclosureSource
from app.services.sources.sample_json_source import SampleJsonSource
from app.services.sync import SyncResult, sync_trades

logger = logging.getLogger(__name__)

settings = get_settings()

app = FastAPI(title="Congress Trades Sync", description="Legislator stock trade disclosures")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Client-Info", "Apikey"],
)


@app.on_event("startup")
def startup() -> None:
    setup_logging(settings.log_level)
    init_db()


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        {
            "status": "error",
            "message": str(exc) or "Unknown error",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        status_code=500,
    )


def get_db() -> Session:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_sources() -> list[TradeSource]:
    sources: list[TradeSource] = [HouseDisclosureSource()]
    if settings.sample_trades_path is not None:
        sources.append(SampleJsonSource(settings.sample_trades_path))
    return sources


def _sync_response(result: SyncResult) -> JSONResponse:
    body = SyncResponse(status=result.status, message=result.message, timestamp=result.timestamp)
    if result.ok:
        body.result = SyncCounts(
            legislators_created=result.legislators_created,
            trades_created=result.trades_created,
            records_processed=result.records_processed,
            records_skipped=result.records_skipped,
        )
    return JSONResponse(
        body.model_dump(mode="json", exclude_none=True),
        status_code=200 if result.ok else 500,
    )


@app.api_route("/sync", methods=["GET", "POST"])
def run_sync(
    db: Session = Depends(get_db),
    sources: list[TradeSource] = Depends(get_sources),
) -> JSONResponse:
    return _sync_response(sync_trades(db, sources, settings))


def _member_stats_query(db: Session):
    stats = (
        db.query(
            Trade.member_id.label("member_id"),
            func.count(Trade.id).label("total_trades"),
            func.sum(case((Trade.transaction_type == "purchase", 1), else_=0)).label("total_purchases"),
            func.sum(case((Trade.transaction_type == "sale", 1), else_=0)).label("total_sales"),
            func.max(Trade.transaction_date).label("latest_trade_date"),
        )
        .group_by(Trade.member_id)
        .subquery()
    )
    return db.query(
        Legislator,
        stats.c.total_trades,
        stats.c.total_purchases,
        stats.c.total_sales,
        stats.c.latest_trade_date,
    ).outerjoin(stats, stats.c.member_id == Legislator.id)


def _legislator_out(row, model: type[LegislatorOut] = LegislatorOut, **extra) -> LegislatorOut:
    legislator, total, purchases, sales, latest = row
    return model(
        id=legislator.id,
        full_name=legislator.full_name,
        state=legislator.state,
        party=legislator.party,
        chamber=legislator.chamber,
        image_url=legislator.image_url,
        created_at=legislator.created_at,
        total_trades=total or 0,
        total_purchases=purchases or 0,
        total_sales=sales or 0,
        latest_trade_date=latest,
        **extra,
    )


@app.get("/api/members", response_model=list[LegislatorOut])
def api_members(db: Session = Depends(get_db)) -> list[LegislatorOut]:
    rows = _member_stats_query(db).order_by(Legislator.full_name.asc()).all()
    return [_legislator_out(row) for row in rows]


@app.get("/api/members/{member_id}", response_model=LegislatorDetailOut)
def api_member(member_id: int, db: Session = Depends(get_db)) -> LegislatorDetailOut:
    row = _member_stats_query(db).filter(Legislator.id == member_id).one_or_none()
    if row is None:
        raise HTTPException(status_code=404, detail="Legislator not found")
    trades = (
        db.query(Trade)
        .filter(Trade.member_id == member_id)
        .order_by(Trade.transaction_date.desc())
        .all()
    )
    ticker_counts = Counter(trade.ticker for trade in trades)
    return _legislator_out(
        row,
        LegislatorDetailOut,
        top_tickers=[
            TickerCount(ticker=ticker, count=count)
            for ticker, count in ticker_counts.most_common(5)
        ],
        trades=[TradeOut.model_validate(trade) for trade in trades],
    )


@app.get("/api/trades", response_model=list[TradeOut])
def api_trades(
    member_id: int | None = None,
    ticker: str | None = None,
    transaction_type: str | None = Query(None, alias="type"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> list[TradeOut]:
    query = db.query(Trade)
    if member_id:
        query = query.filter(Trade.member_id == member_id)
    if ticker:
        query = query.filter(Trade.ticker == ticker.upper())
    if transaction_type:
        query = query.filter(Trade.transaction_type == transaction_type.lower())
    trades = (
        query.order_by(Trade.transaction_date.desc(), Trade.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return [TradeOut.model_validate(trade) for trade in trades]


@app.get("/api/meta", response_model=MetaOut)
def api_meta(db: Session = Depends(get_db)) -> MetaOut:
    last_sync = db.query(SyncLog).order_by(SyncLog.run_at.desc()).first()
    return MetaOut(
        last_sync_time=last_sync.run_at if last_sync else None,
        number_of_trades=db.query(func.count(Trade.id)).scalar() or 0,
        number_of_legislators=db.query(func.count(Legislator.id)).scalar() or 0,
    )
