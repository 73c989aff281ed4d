from __future__ import annotations

from datetime import date

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db import Base
from app.main import app, get_db, get_sources
from app.services.sources.base import RawTrade, TradeSource


class DummySource(TradeSource):
    source_name = "dummy"

    def __init__(self, trades: list[RawTrade]) -> None:
        self._trades = trades

    def fetch_trades(self) -> list[RawTrade]:
        return self._trades


def make_raw(**overrides) -> RawTrade:
    values = dict(
        member_name="Jane Doe",
        state="CA",
        party="Democrat",
        chamber="House",
        ticker="AAPL",
        asset_name="Apple Inc.",
        transaction_type="purchase",
        transaction_date=date(2024, 3, 1),
        disclosure_date=date(2024, 3, 20),
        amount="$1,001 - $15,000",
    )
    values.update(overrides)
    return RawTrade(**values)


def create_client(trades: list[RawTrade]) -> TestClient:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session = sessionmaker(bind=engine)

    def override_get_db():
        db = testing_session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_sources] = lambda: [DummySource(trades)]
    return TestClient(app)


def teardown_function() -> None:
    app.dependency_overrides.clear()


def test_sync_endpoint_reports_counts() -> None:
    client = create_client([make_raw(), make_raw(ticker="MSFT", transaction_type="sale")])

    response = client.post("/sync")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["result"]["legislators_created"] == 1
    assert body["result"]["trades_created"] == 2
    assert "timestamp" in body

    again = client.get("/sync").json()
    assert again["result"]["legislators_created"] == 0
    assert again["result"]["trades_created"] == 0


def test_sync_with_no_records() -> None:
    client = create_client([])
    body = client.post("/sync").json()
    assert body["status"] == "success"
    assert body["result"] == {
        "legislators_created": 0,
        "trades_created": 0,
        "records_processed": 0,
        "records_skipped": 0,
    }


def test_members_include_trade_stats() -> None:
    client = create_client(
        [
            make_raw(),
            make_raw(ticker="MSFT", transaction_type="sale", transaction_date=date(2024, 4, 2)),
            make_raw(member_name="Adam Able", state="NY", ticker="AAPL"),
        ]
    )
    client.post("/sync")

    members = client.get("/api/members").json()
    assert [member["full_name"] for member in members] == ["Adam Able", "Jane Doe"]
    jane = members[1]
    assert jane["total_trades"] == 2
    assert jane["total_purchases"] == 1
    assert jane["total_sales"] == 1
    assert jane["latest_trade_date"] == "2024-04-02"


def test_member_detail_lists_trades_newest_first() -> None:
    client = create_client(
        [
            make_raw(),
            make_raw(ticker="MSFT", transaction_date=date(2024, 4, 2)),
            make_raw(ticker="AAPL", transaction_date=date(2024, 5, 3), amount="N/A"),
        ]
    )
    client.post("/sync")
    member_id = client.get("/api/members").json()[0]["id"]

    detail = client.get(f"/api/members/{member_id}").json()
    assert [trade["transaction_date"] for trade in detail["trades"]] == [
        "2024-05-03",
        "2024-04-02",
        "2024-03-01",
    ]
    assert detail["trades"][0]["amount_min"] == 0
    assert detail["top_tickers"][0] == {"ticker": "AAPL", "count": 2}


def test_unknown_member_is_404() -> None:
    client = create_client([])
    assert client.get("/api/members/999").status_code == 404


def test_trades_filter_by_type_and_meta() -> None:
    client = create_client(
        [
            make_raw(),
            make_raw(ticker="MSFT", transaction_type="sale"),
        ]
    )
    client.post("/sync")

    sales = client.get("/api/trades", params={"type": "SALE"}).json()
    assert [trade["ticker"] for trade in sales] == ["MSFT"]

    meta = client.get("/api/meta").json()
    assert meta["number_of_trades"] == 2
    assert meta["number_of_legislators"] == 1
    assert meta["last_sync_time"] is not None


def test_sync_with_unreachable_store_returns_500(tmp_path) -> None:
    client = create_client([make_raw()])
    missing = tmp_path / "missing" / "nested" / "trades.db"
    broken_session = sessionmaker(bind=create_engine(f"sqlite:///{missing}"))

    def unreachable_db():
        db = broken_session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = unreachable_db

    response = client.post("/sync")
    assert response.status_code == 500
    body = response.json()
    assert body["status"] == "error"
    assert "unreachable" in body["message"]
    assert "timestamp" in body
    assert "result" not in body
