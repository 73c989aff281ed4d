from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Protocol


@dataclass
class RawTrade:
    member_name: str
    state: str
    party: str | None
    chamber: str | None
    ticker: str
    asset_name: str | None
    transaction_type: str
    transaction_date: date
    disclosure_date: date | None
    amount: str


class SourceError(Exception):
    """A trade source could not produce its records."""


class TradeSource(Protocol):
    source_name: str

    def fetch_trades(self) -> list[RawTrade]:
        raise NotImplementedError
