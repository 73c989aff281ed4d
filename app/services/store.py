"""Natural-key lookups and inserts against the trades database.

Every write commits on its own so a rejected row never poisons the rest of
the batch. Transient ``OperationalError``s are retried with linear backoff;
constraint violations and other database errors surface immediately as
``StoreError``.
"""

from __future__ import annotations

import logging
import time
from datetime import date
from typing import Callable, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.db import check_connection
from app.models import Legislator, Trade
from app.services.amounts import AmountRange
from app.services.sources.base import RawTrade

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreError(Exception):
    """A single store operation failed."""


class StoreUnavailableError(StoreError):
    """The store could not be reached at all."""


class TradeStore:
    def __init__(
        self,
        session: Session,
        retry_attempts: int = 3,
        backoff_seconds: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.session = session
        self.retry_attempts = max(1, retry_attempts)
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep

    def _run(self, operation: str, fn: Callable[[], T]) -> T:
        for attempt in range(1, self.retry_attempts + 1):
            try:
                return fn()
            except OperationalError as exc:
                self.session.rollback()
                if attempt == self.retry_attempts:
                    raise StoreError(f"{operation} failed after {attempt} attempts: {exc}") from exc
                delay = self.backoff_seconds * attempt
                logger.warning(
                    "Transient store error during %s, retry %d/%d in %.1fs: %s",
                    operation,
                    attempt,
                    self.retry_attempts,
                    delay,
                    exc,
                )
                self._sleep(delay)
            except SQLAlchemyError as exc:
                self.session.rollback()
                raise StoreError(f"{operation} failed: {exc}") from exc
        raise StoreError(f"{operation} was not attempted")

    def ping(self) -> None:
        try:
            self._run("ping", lambda: check_connection(self.session))
        except StoreError as exc:
            raise StoreUnavailableError(str(exc)) from exc

    def find_legislator_id(self, full_name: str, state: str) -> int | None:
        stmt = select(Legislator.id).where(
            Legislator.full_name == full_name,
            Legislator.state == state,
        )
        return self._run("legislator lookup", lambda: self.session.execute(stmt).scalar_one_or_none())

    def insert_legislator(self, raw: RawTrade) -> int:
        def insert() -> int:
            legislator = Legislator(
                full_name=raw.member_name,
                state=raw.state,
                party=raw.party,
                chamber=raw.chamber,
            )
            self.session.add(legislator)
            self.session.flush()
            legislator_id = legislator.id
            self.session.commit()
            return legislator_id

        return self._run("legislator insert", insert)

    def find_trade_id(self, member_id: int, ticker: str, transaction_date: date) -> int | None:
        stmt = select(Trade.id).where(
            Trade.member_id == member_id,
            Trade.ticker == ticker,
            Trade.transaction_date == transaction_date,
        )
        return self._run("trade lookup", lambda: self.session.execute(stmt).scalar_one_or_none())

    def insert_trade(self, member_id: int, raw: RawTrade, amount: AmountRange) -> int:
        def insert() -> int:
            trade = Trade(
                member_id=member_id,
                ticker=raw.ticker,
                asset_name=raw.asset_name,
                transaction_type=raw.transaction_type,
                transaction_date=raw.transaction_date,
                disclosure_date=raw.disclosure_date,
                amount_range=amount.range,
                amount_min=amount.min,
                amount_max=amount.max,
            )
            self.session.add(trade)
            self.session.flush()
            trade_id = trade.id
            self.session.commit()
            return trade_id

        return self._run("trade insert", insert)
