from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from tradingdiary.models.goals import Goal
from tradingdiary.models.trades import Trade
from tradingdiary.schemas.goals import GoalCreate, GoalProgressResponse, GoalResponse, GoalUpdate
from tradingdiary.utils.time import to_utc, utc_now


logger = logging.getLogger(__name__)

COMPLETED = "COMPLETED"
_REQUIRED_FIELDS = {"name", "goal_type", "target_amount", "start_date", "end_date", "portfolio_ids", "status"}


class GoalNotFound(LookupError):
    pass


def expire_goals(db: Session, now: datetime | None = None) -> int:
    """Mark goals whose window has ended as completed.

    Goals whose status was set by hand are left alone.
    """

    now = now or utc_now()
    expired = (
        db.query(Goal)
        .filter(
            Goal.end_date < now,
            Goal.is_status_edited.is_(False),
            Goal.status != COMPLETED,
        )
        .update({Goal.status: COMPLETED}, synchronize_session=False)
    )
    db.commit()
    if expired:
        logger.info("Marked %s goal(s) as completed", expired)
    return expired


def goal_progress(db: Session, goal: Goal) -> Tuple[float, float]:
    portfolio_ids = list(goal.portfolio_ids or [])
    if not portfolio_ids:
        current = 0.0
    else:
        current = (
            db.query(func.coalesce(func.sum(Trade.pl), 0.0))
            .filter(
                Trade.portfolio_id.in_(portfolio_ids),
                Trade.trade_date >= goal.start_date,
                Trade.trade_date <= goal.end_date,
                Trade.pl.isnot(None),
            )
            .scalar()
        ) or 0.0
    percentage = current / goal.target_amount * 100 if goal.target_amount else 0.0
    return current, percentage


def list_goals(db: Session, goal_type: Optional[str] = None) -> List[GoalProgressResponse]:
    expire_goals(db)
    query = db.query(Goal)
    if goal_type:
        query = query.filter(Goal.goal_type == goal_type)

    results = []
    for goal in query.order_by(Goal.created_at.desc(), Goal.id.desc()).all():
        current, percentage = goal_progress(db, goal)
        results.append(
            GoalProgressResponse(
                **GoalResponse.model_validate(goal).model_dump(),
                current_amount=current,
                progress_percentage=percentage,
            )
        )
    return results


def get_goal(db: Session, goal_id: int) -> Goal:
    goal = db.get(Goal, goal_id)
    if goal is None:
        raise GoalNotFound(goal_id)
    return goal


def create_goal(db: Session, payload: GoalCreate) -> Goal:
    data = payload.model_dump()
    data["start_date"] = to_utc(data["start_date"])
    data["end_date"] = to_utc(data["end_date"])
    goal = Goal(**data)
    db.add(goal)
    db.commit()
    db.refresh(goal)
    return goal


def update_goal(db: Session, goal: Goal, payload: GoalUpdate) -> Goal:
    data = payload.model_dump(exclude_unset=True)
    if "status" in data and data["status"] is not None and data["status"] != goal.status:
        data["is_status_edited"] = True
    for key in ("start_date", "end_date"):
        if data.get(key) is not None:
            data[key] = to_utc(data[key])
    for field, value in data.items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(goal, field, value)
    db.add(goal)
    db.commit()
    db.refresh(goal)
    return goal


def delete_goal(db: Session, goal: Goal) -> None:
    db.delete(goal)
    db.commit()
