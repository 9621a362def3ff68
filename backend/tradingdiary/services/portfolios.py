from __future__ import annotations

import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from tradingdiary.models.portfolios import Portfolio, PortfolioTransaction
from tradingdiary.models.trades import Trade
from tradingdiary.schemas.portfolios import PortfolioSummary, PortfolioTransactionCreate


logger = logging.getLogger(__name__)

PAYIN = "PAYIN"
PAYOUT = "PAYOUT"


class PortfolioNotFound(LookupError):
    pass


class InsufficientBalance(ValueError):
    pass


def get_portfolio(db: Session, portfolio_id: int) -> Portfolio:
    portfolio = db.get(Portfolio, portfolio_id)
    if portfolio is None:
        raise PortfolioNotFound(portfolio_id)
    return portfolio


def record_transaction(db: Session, portfolio: Portfolio, payload: PortfolioTransactionCreate) -> PortfolioTransaction:
    """Book a deposit or withdrawal and move the portfolio balance accordingly."""

    balance = portfolio.balance or 0.0
    if payload.type == PAYOUT:
        if payload.amount > balance:
            raise InsufficientBalance(
                f"Payout of {payload.amount:.2f} exceeds the balance of {balance:.2f}"
            )
        portfolio.balance = balance - payload.amount
    else:
        portfolio.balance = balance + payload.amount

    transaction = PortfolioTransaction(portfolio_id=portfolio.id, **payload.model_dump())
    db.add(transaction)
    db.add(portfolio)
    db.commit()
    db.refresh(transaction)
    logger.info(
        "Portfolio %s %s of %.2f, balance now %.2f",
        portfolio.id,
        payload.type,
        payload.amount,
        portfolio.balance,
    )
    return transaction


def list_transactions(db: Session, portfolio: Portfolio) -> List[PortfolioTransaction]:
    return (
        db.query(PortfolioTransaction)
        .filter(PortfolioTransaction.portfolio_id == portfolio.id)
        .order_by(PortfolioTransaction.created_at.desc(), PortfolioTransaction.id.desc())
        .all()
    )


def portfolio_summary(db: Session, portfolio: Portfolio) -> PortfolioSummary:
    total_trades, closed_trades, realized = (
        db.query(
            func.count(Trade.id),
            func.count(Trade.pl),
            func.coalesce(func.sum(Trade.pl), 0.0),
        )
        .filter(Trade.portfolio_id == portfolio.id)
        .one()
    )
    balance = portfolio.balance or 0.0
    return PortfolioSummary(
        portfolio_id=portfolio.id,
        name=portfolio.name,
        balance=balance,
        realized_pnl=realized,
        equity=balance + realized,
        total_trades=total_trades,
        closed_trades=closed_trades,
    )
