from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tradingdiary.api import deps
from tradingdiary.api import goals as goals_api
from tradingdiary.db import base  # noqa: F401  # register every table
from tradingdiary.models.base import Base
from tradingdiary.models.goals import Goal
from tradingdiary.models.system_logs import SystemLog
from tradingdiary.models.trades import Trade
from tradingdiary.services.goals import expire_goals, goal_progress
from tradingdiary.workers.goals import run_goal_expiry


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

    app.include_router(goals_api.router)
    app.dependency_overrides[deps.get_db] = override_get_db
    return app


def _closed_trade(portfolio_id: int, pl: float, trade_date: datetime) -> Trade:
    return Trade(
        portfolio_id=portfolio_id,
        strategy_id=1,
        symbol_id=1,
        type="buy",
        quantity=1.0,
        entry_price=100.0,
        exit_price=100.0 + pl,
        pl=pl,
        trade_date=trade_date,
        outcome="win" if pl > 0 else "loss",
        entry_reason="Setup",
        exit_reason="Plan",
    )


def test_goal_crud_flow() -> None:
    engine, SessionLocal = _create_session()
    try:
        client = TestClient(_create_app(SessionLocal))

        response = client.post(
            "/goals/",
            json={
                "name": "Q3 target",
                "goal_type": "REAL",
                "target_amount": 1000,
                "start_date": "2099-07-01T00:00:00Z",
                "end_date": "2099-09-30T00:00:00Z",
                "portfolio_ids": [1],
            },
        )
        assert response.status_code == 201
        goal = response.json()
        assert goal["status"] == "ACTIVE"
        assert goal["is_status_edited"] is False
        goal_id = goal["id"]

        response = client.put(f"/goals/{goal_id}", json={"name": "Q3 stretch"})
        assert response.status_code == 200
        assert response.json()["is_status_edited"] is False

        response = client.put(f"/goals/{goal_id}", json={"status": "ACTIVE"})
        assert response.json()["is_status_edited"] is False

        response = client.put(f"/goals/{goal_id}", json={"status": "ARCHIVED"})
        assert response.status_code == 200
        assert response.json()["status"] == "ARCHIVED"
        assert response.json()["is_status_edited"] is True

        response = client.get("/goals/", params={"type": "TESTING"})
        assert response.json() == []

        response = client.get("/goals/", params={"type": "REAL"})
        payload = response.json()
        assert [item["name"] for item in payload] == ["Q3 stretch"]
        assert payload[0]["current_amount"] == 0.0

        assert client.delete(f"/goals/{goal_id}").json() == {"message": "Goal deleted successfully"}
        assert client.put(f"/goals/{goal_id}", json={"name": "x"}).status_code == 404
    finally:
        engine.dispose()


def test_goal_rejects_inverted_window() -> None:
    engine, SessionLocal = _create_session()
    try:
        client = TestClient(_create_app(SessionLocal))
        response = client.post(
            "/goals/",
            json={
                "name": "Backwards",
                "goal_type": "REAL",
                "target_amount": 100,
                "start_date": "2024-02-01T00:00:00Z",
                "end_date": "2024-01-01T00:00:00Z",
            },
        )
        assert response.status_code == 422
    finally:
        engine.dispose()


def test_expire_goals_skips_manually_edited() -> None:
    engine, SessionLocal = _create_session()
    db = SessionLocal()
    try:
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        past = dict(start_date=now - timedelta(days=60), end_date=now - timedelta(days=1))
        db.add_all(
            [
                Goal(name="expired", goal_type="REAL", target_amount=100, **past),
                Goal(name="edited", goal_type="REAL", target_amount=100, is_status_edited=True, **past),
                Goal(
                    name="running",
                    goal_type="REAL",
                    target_amount=100,
                    start_date=now - timedelta(days=1),
                    end_date=now + timedelta(days=30),
                ),
            ]
        )
        db.commit()

        assert expire_goals(db, now) == 1
        statuses = {goal.name: goal.status for goal in db.query(Goal).all()}
        assert statuses == {"expired": "COMPLETED", "edited": "ACTIVE", "running": "ACTIVE"}

        assert expire_goals(db, now) == 0
    finally:
        db.close()
        engine.dispose()


def test_goal_progress_sums_realized_pl_in_window() -> None:
    engine, SessionLocal = _create_session()
    db = SessionLocal()
    try:
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        goal = Goal(
            name="January",
            goal_type="REAL",
            target_amount=400,
            start_date=start,
            end_date=start + timedelta(days=31),
            portfolio_ids=[1, 2],
        )
        db.add(goal)
        db.add_all(
            [
                _closed_trade(1, 150.0, start + timedelta(days=2)),
                _closed_trade(2, -50.0, start + timedelta(days=5)),
                _closed_trade(3, 999.0, start + timedelta(days=5)),
                _closed_trade(1, 500.0, start + timedelta(days=45)),
            ]
        )
        db.commit()

        current, percentage = goal_progress(db, goal)
        assert current == 100.0
        assert percentage == 25.0
    finally:
        db.close()
        engine.dispose()


def test_goal_expiry_worker_records_logs() -> None:
    engine, SessionLocal = _create_session()
    db = SessionLocal()
    try:
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        db.add(
            Goal(
                name="old",
                goal_type="TESTING",
                target_amount=50,
                start_date=now - timedelta(days=10),
                end_date=now - timedelta(days=2),
            )
        )
        db.commit()

        assert run_goal_expiry(db, now) == 1

        logs = db.query(SystemLog).order_by(SystemLog.id.asc()).all()
        assert [log.message for log in logs] == ["Goal expiry started", "Goal expiry completed"]
        assert all(log.component == "goals" and log.level == "INFO" for log in logs)
        assert json.loads(logs[1].meta_json)["expired"] == 1
    finally:
        db.close()
        engine.dispose()


def test_system_log_timestamp_defaults_to_now() -> None:
    engine, SessionLocal = _create_session()
    db = SessionLocal()
    try:
        before = datetime.now(timezone.utc).replace(tzinfo=None)
        db.add(SystemLog(level="INFO", component="goals", message="manual entry"))
        db.commit()

        log = db.query(SystemLog).one()
        assert log.ts is not None
        assert log.ts.replace(tzinfo=None) >= before - timedelta(seconds=1)
    finally:
        db.close()
        engine.dispose()
