from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tradingdiary.api import deps
from tradingdiary.models.strategies import Strategy
from tradingdiary.schemas.strategies import (
    StrategyCreate,
    StrategyLimitStatus,
    StrategyResponse,
    StrategyUpdate,
)
from tradingdiary.services.strategies import strategy_limits

router = APIRouter(prefix="/strategies", tags=["strategies"])


def _load_strategy(db: Session, strategy_id: int) -> Strategy:
    strategy = db.get(Strategy, strategy_id)
    if strategy is None:
        raise HTTPException(status_code=404, detail="Strategy not found")
    return strategy


@router.get("/", response_model=list[StrategyResponse])
def list_strategies(db: Session = Depends(deps.get_db)) -> list[Strategy]:
    return db.query(Strategy).order_by(Strategy.id.asc()).all()


@router.get("/limits", response_model=list[StrategyLimitStatus])
def list_strategy_limits(db: Session = Depends(deps.get_db)) -> list[StrategyLimitStatus]:
    return strategy_limits(db)


@router.get("/{strategy_id}", response_model=StrategyResponse)
def get_strategy(strategy_id: int, db: Session = Depends(deps.get_db)) -> Strategy:
    return _load_strategy(db, strategy_id)


@router.post("/", response_model=StrategyResponse, status_code=201)
def create_strategy(payload: StrategyCreate, db: Session = Depends(deps.get_db)) -> Strategy:
    strategy = Strategy(**payload.model_dump())
    db.add(strategy)
    db.commit()
    db.refresh(strategy)
    return strategy


@router.put("/{strategy_id}", response_model=StrategyResponse)
def update_strategy(
    strategy_id: int,
    payload: StrategyUpdate,
    db: Session = Depends(deps.get_db),
) -> Strategy:
    strategy = _load_strategy(db, strategy_id)
    data = payload.model_dump(exclude_unset=True)
    if "name" in data and data["name"] is None:
        raise HTTPException(status_code=400, detail="Name cannot be empty")
    for field, value in data.items():
        setattr(strategy, field, value)
    db.add(strategy)
    db.commit()
    db.refresh(strategy)
    return strategy


@router.delete("/{strategy_id}")
def delete_strategy(strategy_id: int, db: Session = Depends(deps.get_db)) -> dict[str, str]:
    strategy = _load_strategy(db, strategy_id)
    db.delete(strategy)
    db.commit()
    return {"message": "Strategy deleted"}
