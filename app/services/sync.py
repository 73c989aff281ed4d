from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.models import SyncLog
from app.services.reconciliation import reconcile
from app.services.sources.base import RawTrade, SourceError, TradeSource
from app.services.store import StoreUnavailableError, TradeStore

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    status: str
    message: str
    legislators_created: int = 0
    trades_created: int = 0
    records_processed: int = 0
    records_skipped: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def ok(self) -> bool:
        return self.status == "success"


def fetch_all(sources: list[TradeSource]) -> list[RawTrade]:
    records: list[RawTrade] = []
    for source in sources:
        fetched = source.fetch_trades()
        logger.info("Fetched %d trades from %s", len(fetched), source.source_name)
        records.extend(fetched)
    return records


def _record_run(session: Session, result: SyncResult) -> None:
    try:
        session.add(
            SyncLog(
                run_at=result.timestamp.replace(tzinfo=None),
                legislators_created=result.legislators_created,
                trades_created=result.trades_created,
            )
        )
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Could not record sync run")


def sync_trades(
    session: Session,
    sources: list[TradeSource],
    settings: Settings | None = None,
) -> SyncResult:
    settings = settings or get_settings()
    store = TradeStore(
        session,
        retry_attempts=settings.store_retry_attempts,
        backoff_seconds=settings.store_retry_backoff_seconds,
    )
    try:
        store.ping()
    except StoreUnavailableError as exc:
        logger.error("Trade store unreachable, aborting sync: %s", exc)
        return SyncResult(status="error", message=f"Trade store unreachable: {exc}")

    try:
        records = fetch_all(sources)
    except SourceError as exc:
        logger.error("Trade fetch failed, aborting sync: %s", exc)
        result = SyncResult(status="error", message=f"Trade fetch failed: {exc}")
        _record_run(session, result)
        return result

    if not records:
        logger.info("No trades fetched. Returning empty result.")
        result = SyncResult(status="success", message="Sync completed")
        _record_run(session, result)
        return result

    summary = reconcile(store, records)
    result = SyncResult(
        status="success",
        message="Sync completed",
        legislators_created=summary.legislators_created,
        trades_created=summary.trades_created,
        records_processed=summary.records_processed,
        records_skipped=summary.records_skipped,
    )
    _record_run(session, result)
    return result
