from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tradingdiary.api import deps
from tradingdiary.api import portfolios as portfolios_api
from tradingdiary.db import base  # noqa: F401  # register every table
from tradingdiary.models.base import Base
from tradingdiary.models.portfolios import PortfolioTransaction
from tradingdiary.models.trades import Trade


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

    app.include_router(portfolios_api.router)
    app.dependency_overrides[deps.get_db] = override_get_db
    return app


def test_portfolio_crud_flow() -> None:
    engine, SessionLocal = _create_session()
    try:
        client = TestClient(_create_app(SessionLocal))

        response = client.post("/portfolios/", json={"name": "Main", "balance": 1000})
        assert response.status_code == 201
        portfolio = response.json()
        assert portfolio["is_testing"] is False
        portfolio_id = portfolio["id"]

        client.post("/portfolios/", json={"name": "Paper", "is_testing": True})
        assert [item["name"] for item in client.get("/portfolios/").json()] == ["Main", "Paper"]

        response = client.put(f"/portfolios/{portfolio_id}", json={"name": "Main account", "balance": None})
        assert response.status_code == 200
        assert response.json()["name"] == "Main account"
        assert response.json()["balance"] == 1000.0

        assert client.get("/portfolios/999").status_code == 404

        response = client.delete(f"/portfolios/{portfolio_id}")
        assert response.json() == {"message": "Portfolio deleted"}
        assert client.get(f"/portfolios/{portfolio_id}").status_code == 404
    finally:
        engine.dispose()


def test_payin_and_payout_move_balance() -> None:
    engine, SessionLocal = _create_session()
    try:
        client = TestClient(_create_app(SessionLocal))
        portfolio_id = client.post("/portfolios/", json={"name": "Main", "balance": 100}).json()["id"]

        response = client.post(
            f"/portfolios/{portfolio_id}/transactions",
            json={"type": "PAYIN", "amount": 400, "before_open": True, "note": "Initial funding"},
        )
        assert response.status_code == 201
        assert response.json()["portfolio_id"] == portfolio_id

        response = client.post(
            f"/portfolios/{portfolio_id}/transactions",
            json={"type": "PAYOUT", "amount": 150},
        )
        assert response.status_code == 201
        assert client.get(f"/portfolios/{portfolio_id}").json()["balance"] == 350.0

        response = client.post(
            f"/portfolios/{portfolio_id}/transactions",
            json={"type": "PAYOUT", "amount": 1000},
        )
        assert response.status_code == 400
        assert client.get(f"/portfolios/{portfolio_id}").json()["balance"] == 350.0

        response = client.post(
            f"/portfolios/{portfolio_id}/transactions",
            json={"type": "PAYOUT", "amount": -5},
        )
        assert response.status_code == 422

        response = client.get(f"/portfolios/{portfolio_id}/transactions")
        assert [item["type"] for item in response.json()] == ["PAYOUT", "PAYIN"]
    finally:
        engine.dispose()


def test_portfolio_summary_includes_realized_pnl() -> None:
    engine, SessionLocal = _create_session()
    try:
        client = TestClient(_create_app(SessionLocal))
        portfolio_id = client.post("/portfolios/", json={"name": "Main", "balance": 1000}).json()["id"]

        with SessionLocal() as db:
            for pl, exit_price in ((120.0, 112.0), (-40.0, 96.0), (None, None)):
                db.add(
                    Trade(
                        portfolio_id=portfolio_id,
                        strategy_id=1,
                        symbol_id=1,
                        type="buy",
                        quantity=10.0,
                        entry_price=100.0,
                        exit_price=exit_price,
                        pl=pl,
                        outcome="neutral",
                        entry_reason="Setup",
                        exit_reason="Plan",
                    )
                )
            db.commit()

        response = client.get(f"/portfolios/{portfolio_id}/summary")
        assert response.status_code == 200
        assert response.json() == {
            "portfolio_id": portfolio_id,
            "name": "Main",
            "balance": 1000.0,
            "realized_pnl": 80.0,
            "equity": 1080.0,
            "total_trades": 3,
            "closed_trades": 2,
        }
    finally:
        engine.dispose()


def test_deleting_portfolio_removes_transactions() -> None:
    engine, SessionLocal = _create_session()
    try:
        client = TestClient(_create_app(SessionLocal))
        portfolio_id = client.post("/portfolios/", json={"name": "Main"}).json()["id"]
        client.post(f"/portfolios/{portfolio_id}/transactions", json={"type": "PAYIN", "amount": 10})

        client.delete(f"/portfolios/{portfolio_id}")

        with SessionLocal() as db:
            assert db.query(PortfolioTransaction).count() == 0
    finally:
        engine.dispose()
