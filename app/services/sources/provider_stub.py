from __future__ import annotations

from app.services.sources.base import RawTrade, TradeSource


class HouseDisclosureSource(TradeSource):
    """Placeholder for the House clerk disclosure feed.

    Parsing of the clerk's filings is not implemented; the source always
    yields no trades so scheduled syncs complete as zero-work runs.
    """

    source_name = "house_disclosures"

    def fetch_trades(self) -> list[RawTrade]:
        return []
