"""Turn raw disclosure records into deduplicated legislators and trades.

Each record is resolved on its own: a store failure for one record is
reported as that record's outcome and the batch moves on.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from app.services.amounts import parse_amount_range
from app.services.sources.base import RawTrade
from app.services.store import StoreError, TradeStore

logger = logging.getLogger(__name__)


class RecordStatus(str, Enum):
    CREATED = "created"
    DUPLICATE = "duplicate"
    LEGISLATOR_FAILED = "legislator_failed"
    TRADE_FAILED = "trade_failed"


@dataclass
class RecordOutcome:
    status: RecordStatus
    legislator_id: int | None = None
    legislator_created: bool = False
    trade_id: int | None = None
    error: str | None = None


@dataclass
class ReconcileSummary:
    legislators_created: int = 0
    trades_created: int = 0
    outcomes: list[RecordOutcome] = field(default_factory=list)

    @property
    def records_processed(self) -> int:
        return len(self.outcomes)

    @property
    def records_skipped(self) -> int:
        return sum(
            1
            for outcome in self.outcomes
            if outcome.status in (RecordStatus.LEGISLATOR_FAILED, RecordStatus.TRADE_FAILED)
        )


def reconcile_record(store: TradeStore, raw: RawTrade) -> RecordOutcome:
    legislator_created = False
    try:
        legislator_id = store.find_legislator_id(raw.member_name, raw.state)
        if legislator_id is None:
            legislator_id = store.insert_legislator(raw)
            legislator_created = True
    except StoreError as exc:
        logger.error(
            "Skipping trade %s on %s: could not resolve legislator %r (%s): %s",
            raw.ticker,
            raw.transaction_date,
            raw.member_name,
            raw.state,
            exc,
        )
        return RecordOutcome(status=RecordStatus.LEGISLATOR_FAILED, error=str(exc))

    try:
        trade_id = store.find_trade_id(legislator_id, raw.ticker, raw.transaction_date)
        if trade_id is not None:
            return RecordOutcome(
                status=RecordStatus.DUPLICATE,
                legislator_id=legislator_id,
                legislator_created=legislator_created,
                trade_id=trade_id,
            )
        trade_id = store.insert_trade(legislator_id, raw, parse_amount_range(raw.amount))
    except StoreError as exc:
        logger.error(
            "Dropping trade %s on %s for legislator %s: %s",
            raw.ticker,
            raw.transaction_date,
            legislator_id,
            exc,
        )
        return RecordOutcome(
            status=RecordStatus.TRADE_FAILED,
            legislator_id=legislator_id,
            legislator_created=legislator_created,
            error=str(exc),
        )

    return RecordOutcome(
        status=RecordStatus.CREATED,
        legislator_id=legislator_id,
        legislator_created=legislator_created,
        trade_id=trade_id,
    )


def reconcile(store: TradeStore, records: Iterable[RawTrade]) -> ReconcileSummary:
    summary = ReconcileSummary()
    for raw in records:
        outcome = reconcile_record(store, raw)
        summary.outcomes.append(outcome)
        if outcome.legislator_created:
            summary.legislators_created += 1
        if outcome.status is RecordStatus.CREATED:
            summary.trades_created += 1
    logger.info(
        "Reconciled %d records: %d legislators created, %d trades created, %d skipped",
        summary.records_processed,
        summary.legislators_created,
        summary.trades_created,
        summary.records_skipped,
    )
    return summary
