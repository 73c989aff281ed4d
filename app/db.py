from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.config import get_settings


class Base(DeclarativeBase):
    pass


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    connect_args = {}
    if make_url(database_url).get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=echo, connect_args=connect_args)


_settings = get_settings()
engine = create_db_engine(_settings.database_url, echo=_settings.database_echo_sql)
SessionLocal = sessionmaker(bind=engine)


def init_db() -> None:
    from app import models  # noqa: F401

    url = make_url(_settings.database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=engine)


def check_connection(session: Session) -> None:
    """Issue a trivial query; raises ``SQLAlchemyError`` if the store is unreachable."""
    session.execute(text("SELECT 1"))
