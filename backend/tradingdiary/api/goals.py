from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from tradingdiary.api import deps
from tradingdiary.models.goals import Goal
from tradingdiary.schemas.goals import GoalCreate, GoalProgressResponse, GoalResponse, GoalUpdate
from tradingdiary.services.goals import (
    GoalNotFound,
    create_goal,
    delete_goal,
    get_goal,
    list_goals,
    update_goal,
)

router = APIRouter(prefix="/goals", tags=["goals"])


def _load_goal(db: Session, goal_id: int) -> Goal:
    try:
        return get_goal(db, goal_id)
    except GoalNotFound as exc:
        raise HTTPException(status_code=404, detail="Goal not found") from exc


@router.get("/", response_model=list[GoalProgressResponse])
def list_goals_route(
    goal_type: Optional[str] = Query(None, alias="type"),
    db: Session = Depends(deps.get_db),
) -> list[GoalProgressResponse]:
    return list_goals(db, goal_type)


@router.post("/", response_model=GoalResponse, status_code=201)
def create_goal_route(payload: GoalCreate, db: Session = Depends(deps.get_db)) -> Goal:
    return create_goal(db, payload)


@router.put("/{goal_id}", response_model=GoalResponse)
def update_goal_route(goal_id: int, payload: GoalUpdate, db: Session = Depends(deps.get_db)) -> Goal:
    return update_goal(db, _load_goal(db, goal_id), payload)


@router.delete("/{goal_id}")
def delete_goal_route(goal_id: int, db: Session = Depends(deps.get_db)) -> dict[str, str]:
    delete_goal(db, _load_goal(db, goal_id))
    return {"message": "Goal deleted successfully"}
