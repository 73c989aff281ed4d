"""Runtime settings for the sync service, read from ``SYNC_*`` env vars."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SYNC_", env_file=".env", extra="ignore")

    database_url: str = f"sqlite:///{BASE_DIR / 'data' / 'trades.db'}"
    database_echo_sql: bool = False

    log_level: str = "INFO"

    # Applies to OperationalError only; constraint violations are never retried.
    store_retry_attempts: int = 3
    store_retry_backoff_seconds: float = 0.5

    sample_trades_path: Path | None = None

    cors_allow_origins: list[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
