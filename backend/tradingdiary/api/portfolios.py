from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tradingdiary.api import deps
from tradingdiary.models.portfolios import Portfolio, PortfolioTransaction
from tradingdiary.schemas.portfolios import (
    PortfolioCreate,
    PortfolioResponse,
    PortfolioSummary,
    PortfolioTransactionCreate,
    PortfolioTransactionResponse,
    PortfolioUpdate,
)
from tradingdiary.services.portfolios import (
    InsufficientBalance,
    PortfolioNotFound,
    get_portfolio,
    list_transactions,
    portfolio_summary,
    record_transaction,
)

router = APIRouter(prefix="/portfolios", tags=["portfolios"])


def _load_portfolio(db: Session, portfolio_id: int) -> Portfolio:
    try:
        return get_portfolio(db, portfolio_id)
    except PortfolioNotFound as exc:
        raise HTTPException(status_code=404, detail="Portfolio not found") from exc


@router.get("/", response_model=list[PortfolioResponse])
def list_portfolios(db: Session = Depends(deps.get_db)) -> list[Portfolio]:
    return db.query(Portfolio).order_by(Portfolio.id.asc()).all()


@router.get("/{portfolio_id}", response_model=PortfolioResponse)
def get_portfolio_route(portfolio_id: int, db: Session = Depends(deps.get_db)) -> Portfolio:
    return _load_portfolio(db, portfolio_id)


@router.post("/", response_model=PortfolioResponse, status_code=201)
def create_portfolio(payload: PortfolioCreate, db: Session = Depends(deps.get_db)) -> Portfolio:
    portfolio = Portfolio(**payload.model_dump())
    db.add(portfolio)
    db.commit()
    db.refresh(portfolio)
    return portfolio


@router.put("/{portfolio_id}", response_model=PortfolioResponse)
def update_portfolio(
    portfolio_id: int,
    payload: PortfolioUpdate,
    db: Session = Depends(deps.get_db),
) -> Portfolio:
    portfolio = _load_portfolio(db, portfolio_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(portfolio, field, value)
    db.add(portfolio)
    db.commit()
    db.refresh(portfolio)
    return portfolio


@router.delete("/{portfolio_id}")
def delete_portfolio(portfolio_id: int, db: Session = Depends(deps.get_db)) -> dict[str, str]:
    portfolio = _load_portfolio(db, portfolio_id)
    db.delete(portfolio)
    db.commit()
    return {"message": "Portfolio deleted"}


@router.get("/{portfolio_id}/summary", response_model=PortfolioSummary)
def get_portfolio_summary(portfolio_id: int, db: Session = Depends(deps.get_db)) -> PortfolioSummary:
    return portfolio_summary(db, _load_portfolio(db, portfolio_id))


@router.get("/{portfolio_id}/transactions", response_model=list[PortfolioTransactionResponse])
def get_portfolio_transactions(
    portfolio_id: int,
    db: Session = Depends(deps.get_db),
) -> list[PortfolioTransaction]:
    return list_transactions(db, _load_portfolio(db, portfolio_id))


@router.post(
    "/{portfolio_id}/transactions",
    response_model=PortfolioTransactionResponse,
    status_code=201,
)
def create_portfolio_transaction(
    portfolio_id: int,
    payload: PortfolioTransactionCreate,
    db: Session = Depends(deps.get_db),
) -> PortfolioTransaction:
    portfolio = _load_portfolio(db, portfolio_id)
    try:
        return record_transaction(db, portfolio, payload)
    except InsufficientBalance as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
