from __future__ import annotations

import json
from datetime import date
from pathlib import Path

from app.services.sources.base import RawTrade, SourceError


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    return date.fromisoformat(value)


def _text(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class SampleJsonSource:
    source_name = "sample_json"

    def __init__(self, data_path: Path) -> None:
        self.data_path = data_path

    def fetch_trades(self) -> list[RawTrade]:
        try:
            payload = json.loads(self.data_path.read_text())
            return [self._to_raw(entry) for entry in payload]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            raise SourceError(f"could not read trades from {self.data_path}: {exc}") from exc

    @staticmethod
    def _to_raw(entry: dict) -> RawTrade:
        return RawTrade(
            member_name=entry["memberName"].strip(),
            state=entry["state"].strip().upper(),
            party=_text(entry.get("party")),
            chamber=_text(entry.get("chamber")),
            ticker=entry["ticker"].strip().upper(),
            asset_name=_text(entry.get("assetName")),
            transaction_type=entry["transactionType"].strip().lower(),
            transaction_date=date.fromisoformat(entry["transactionDate"]),
            disclosure_date=_parse_date(entry.get("disclosureDate")),
            amount=(entry.get("amount") or "").strip(),
        )
