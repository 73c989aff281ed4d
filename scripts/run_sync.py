from __future__ import annotations

import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.append(str(BASE_DIR))

from app.config import get_settings
from app.db import SessionLocal, init_db
from app.logging_config import setup_logging
from app.services.sources.base import TradeSource
from app.services.sources.provider_stub import HouseDisclosureSource
from app.services.sources.sample_json_source import SampleJsonSource
from app.services.sync import sync_trades


def main() -> int:
    settings = get_settings()
    setup_logging(settings.log_level)
    init_db()
    sources: list[TradeSource] = [HouseDisclosureSource()]
    if settings.sample_trades_path is not None:
        sources.append(SampleJsonSource(settings.sample_trades_path))
    session = SessionLocal()
    try:
        result = sync_trades(session, sources, settings)
    finally:
        session.close()
    if not result.ok:
        print(f"Sync failed: {result.message}")
        return 1
    print(
        f"Sync complete. Added {result.legislators_created} legislators "
        f"and {result.trades_created} trades."
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
