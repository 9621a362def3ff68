from __future__ import annotations

from datetime import datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tradingdiary.api import deps
from tradingdiary.api import strategies as strategies_api
from tradingdiary.api import symbols as symbols_api
from tradingdiary.db import base  # noqa: F401  # register every table
from tradingdiary.models.base import Base
from tradingdiary.models.strategies import Strategy
from tradingdiary.models.trades import Trade
from tradingdiary.services.strategies import strategy_limits
from tradingdiary.utils.time import LOCAL_TZ, to_utc


def _create_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(bind=engine)
    return engine, TestingSessionLocal


def _create_app(SessionLocal):
    app = FastAPI()

    def override_get_db():
        session = SessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.include_router(strategies_api.router)
    app.include_router(symbols_api.router)
    app.dependency_overrides[deps.get_db] = override_get_db
    return app


def test_symbols_crud_flow() -> None:
    engine, SessionLocal = _create_session()
    try:
        client = TestClient(_create_app(SessionLocal))

        response = client.post("/symbols/", json={"symbol": "NIFTY", "name": "Nifty 50"})
        assert response.status_code == 201
        nifty_id = response.json()["id"]

        # Same ticker twice
        response = client.post("/symbols/", json={"symbol": "NIFTY", "name": "Other"})
        assert response.status_code == 400
        assert response.json()["detail"] == "A symbol with this ticker already exists"

        bank_id = client.post("/symbols/", json={"symbol": "BANKNIFTY", "name": "Nifty Bank"}).json()["id"]

        response = client.put(f"/symbols/{bank_id}", json={"symbol": "NIFTY"})
        assert response.status_code == 400

        response = client.put(f"/symbols/{nifty_id}", json={"name": "NIFTY 50 Index"})
        assert response.status_code == 200
        assert response.json()["symbol"] == "NIFTY"

        assert [item["symbol"] for item in client.get("/symbols/").json()] == ["NIFTY", "BANKNIFTY"]

        response = client.delete(f"/symbols/{nifty_id}")
        assert response.json() == {"message": "Symbol deleted successfully"}
        assert client.get(f"/symbols/{nifty_id}").status_code == 404
    finally:
        engine.dispose()


def test_strategies_crud_flow() -> None:
    engine, SessionLocal = _create_session()
    try:
        client = TestClient(_create_app(SessionLocal))

        response = client.post(
            "/strategies/",
            json={"name": "Opening range", "weekly_loss_limit": 100, "monthly_loss_limit": 300},
        )
        assert response.status_code == 201
        strategy_id = response.json()["id"]

        response = client.put(f"/strategies/{strategy_id}", json={"name": None})
        assert response.status_code == 400
        assert response.json()["detail"] == "Name cannot be empty"

        response = client.put(f"/strategies/{strategy_id}", json={"description": "First 15 minutes"})
        assert response.status_code == 200
        assert response.json()["description"] == "First 15 minutes"
        assert response.json()["weekly_loss_limit"] == 100.0

        response = client.get("/strategies/limits")
        assert response.status_code == 200
        assert response.json()[0]["strategy_name"] == "Opening range"

        assert client.delete(f"/strategies/{strategy_id}").json() == {"message": "Strategy deleted"}
        assert client.get(f"/strategies/{strategy_id}").status_code == 404
    finally:
        engine.dispose()


def _loss(strategy_id: int, pl: float, when: datetime) -> Trade:
    return Trade(
        strategy_id=strategy_id,
        symbol_id=1,
        type="buy",
        quantity=1.0,
        entry_price=100.0,
        exit_price=100.0 + pl,
        pl=pl,
        trade_date=to_utc(when),
        outcome="loss" if pl < 0 else "win",
        entry_reason="Setup",
        exit_reason="Plan",
    )


def test_strategy_limits_track_week_and_month() -> None:
    engine, SessionLocal = _create_session()
    db = SessionLocal()
    try:
        capped = Strategy(name="Capped", weekly_loss_limit=100, monthly_loss_limit=300)
        free = Strategy(name="Free")
        db.add_all([capped, free])
        db.commit()

        # Wednesday 15 May 2024, local time
        now = LOCAL_TZ.localize(datetime(2024, 5, 15, 12, 0))
        db.add_all(
            [
                _loss(capped.id, -120.0, datetime(2024, 5, 14, 10, 0)),
                _loss(capped.id, 80.0, datetime(2024, 5, 14, 11, 0)),
                _loss(capped.id, -50.0, datetime(2024, 5, 2, 10, 0)),
                _loss(capped.id, -500.0, datetime(2024, 4, 30, 10, 0)),
                _loss(free.id, -75.0, datetime(2024, 5, 13, 0, 30)),
            ]
        )
        db.commit()

        capped_status, free_status = strategy_limits(db, now)

        assert capped_status.current_weekly_loss == 120.0
        assert capped_status.current_monthly_loss == 170.0
        assert capped_status.weekly_ratio == pytest.approx(1.2)
        assert capped_status.weekly_breached is True
        assert capped_status.monthly_ratio == pytest.approx(170 / 300)
        assert capped_status.monthly_breached is False

        assert free_status.current_weekly_loss == 75.0
        assert free_status.weekly_ratio == 0.0
        assert free_status.weekly_breached is False
    finally:
        db.close()
        engine.dispose()
