from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, constr


class StrategyBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: constr(strip_whitespace=True, min_length=1)
    description: Optional[str] = None
    weekly_loss_limit: Optional[float] = None
    monthly_loss_limit: Optional[float] = None


class StrategyCreate(StrategyBase):
    pass


class StrategyUpdate(BaseModel):
    name: Optional[constr(strip_whitespace=True, min_length=1)] = None
    description: Optional[str] = None
    weekly_loss_limit: Optional[float] = None
    monthly_loss_limit: Optional[float] = None


class StrategyResponse(StrategyBase):
    id: int
    created_at: datetime
    updated_at: datetime


class StrategyLimitStatus(BaseModel):
    strategy_id: int
    strategy_name: str
    weekly_loss_limit: Optional[float] = None
    monthly_loss_limit: Optional[float] = None
    current_weekly_loss: float
    current_monthly_loss: float
    weekly_ratio: float
    monthly_ratio: float
    weekly_breached: bool
    monthly_breached: bool
