from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, constr, model_validator

from tradingdiary.utils.time import to_utc

GoalType = Literal["REAL", "TESTING"]
GoalStatus = Literal["ACTIVE", "COMPLETED", "ARCHIVED"]


class GoalBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: constr(strip_whitespace=True, min_length=1)
    goal_type: GoalType
    target_amount: float
    start_date: datetime
    end_date: datetime
    portfolio_ids: List[int] = Field(default_factory=list)
    status: GoalStatus = "ACTIVE"


class GoalCreate(GoalBase):
    @model_validator(mode="after")
    def _check_window(self) -> "GoalCreate":
        if to_utc(self.end_date) < to_utc(self.start_date):
            raise ValueError("end_date must not be before start_date")
        return self


class GoalUpdate(BaseModel):
    name: Optional[constr(strip_whitespace=True, min_length=1)] = None
    goal_type: Optional[GoalType] = None
    target_amount: Optional[float] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    portfolio_ids: Optional[List[int]] = None
    status: Optional[GoalStatus] = None


class GoalResponse(GoalBase):
    id: int
    is_status_edited: bool
    created_at: datetime
    updated_at: datetime


class GoalProgressResponse(GoalResponse):
    current_amount: float
    progress_percentage: float
