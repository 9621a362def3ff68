from __future__ import annotations

from datetime import datetime
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from tradingdiary.models.strategies import Strategy
from tradingdiary.models.trades import Trade
from tradingdiary.schemas.strategies import StrategyLimitStatus
from tradingdiary.utils.time import month_bounds, to_local, utc_now, week_bounds


def realized_loss(db: Session, strategy_id: int, start: datetime, end: datetime) -> float:
    """Losses booked by a strategy in ``[start, end)``, as a positive amount."""

    total = (
        db.query(func.coalesce(func.sum(Trade.pl), 0.0))
        .filter(
            Trade.strategy_id == strategy_id,
            Trade.pl < 0,
            Trade.trade_date >= start,
            Trade.trade_date < end,
        )
        .scalar()
    )
    return abs(total or 0.0)


def _ratio(current: float, limit: float | None) -> float:
    return current / limit if limit else 0.0


def strategy_limits(db: Session, now: datetime | None = None) -> List[StrategyLimitStatus]:
    now = now or utc_now()
    local_now = to_local(now)
    week_start, week_end = week_bounds(now)
    month_start, month_end = month_bounds(local_now.year, local_now.month)

    statuses = []
    for strategy in db.query(Strategy).order_by(Strategy.id.asc()).all():
        weekly = realized_loss(db, strategy.id, week_start, week_end)
        monthly = realized_loss(db, strategy.id, month_start, month_end)
        weekly_ratio = _ratio(weekly, strategy.weekly_loss_limit)
        monthly_ratio = _ratio(monthly, strategy.monthly_loss_limit)
        statuses.append(
            StrategyLimitStatus(
                strategy_id=strategy.id,
                strategy_name=strategy.name,
                weekly_loss_limit=strategy.weekly_loss_limit,
                monthly_loss_limit=strategy.monthly_loss_limit,
                current_weekly_loss=weekly,
                current_monthly_loss=monthly,
                weekly_ratio=weekly_ratio,
                monthly_ratio=monthly_ratio,
                weekly_breached=bool(strategy.weekly_loss_limit) and weekly_ratio >= 1,
                monthly_breached=bool(strategy.monthly_loss_limit) and monthly_ratio >= 1,
            )
        )
    return statuses
