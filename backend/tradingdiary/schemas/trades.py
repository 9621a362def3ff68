from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, constr, field_validator

from tradingdiary.schemas.tags import TagResponse

TradeType = Literal["buy", "sell"]
Outcome = Literal["win", "loss", "neutral", "missed"]
TradeStatus = Literal["IN", "NIN"]
MarketCondition = Literal["trending", "ranging", "volatile", "choppy"]
Execution = Literal["perfect", "early", "late"]
EmotionalState = Literal["calm", "anxious", "overconfident", "fearful", "tilted"]
RuleViolation = Literal[
    "Early Exit",
    "Late Exit",
    "Overconfidence",
    "Fear",
    "Tilt",
    "Early Entry",
    "Late Entry",
    "Revenge Trade",
]


class TimeframePhoto(BaseModel):
    type: str
    photo: Optional[str] = None


class TradeBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    portfolio_id: Optional[int] = None
    strategy_id: int
    symbol_id: int
    type: TradeType
    quantity: float = Field(..., gt=0)
    entry_price: float
    exit_price: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    fees: Optional[float] = 0.0
    trade_date: Optional[datetime] = None
    outcome: Outcome
    status: Optional[TradeStatus] = None
    confidence_level: Optional[int] = Field(None, ge=1, le=10)
    entry_reason: constr(strip_whitespace=True, min_length=1)
    exit_reason: constr(strip_whitespace=True, min_length=1)
    notes: Optional[str] = None
    photo: Optional[str] = None
    timeframe_photos: List[TimeframePhoto] = Field(default_factory=list)
    entry_id: Optional[int] = None
    is_greed: bool = False
    is_fomo: bool = False
    market_condition: Optional[MarketCondition] = None
    entry_execution: Optional[Execution] = None
    exit_execution: Optional[Execution] = None
    emotional_state: List[EmotionalState] = Field(default_factory=list)
    post_trade_thoughts: Optional[str] = None
    rule_violations: List[RuleViolation] = Field(default_factory=list)


class TradeCreate(TradeBase):
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def _strip_tags(cls, value: List[str]) -> List[str]:
        return [tag.strip() for tag in value if tag and tag.strip()]


class TradeUpdate(BaseModel):
    portfolio_id: Optional[int] = None
    strategy_id: Optional[int] = None
    symbol_id: Optional[int] = None
    type: Optional[TradeType] = None
    quantity: Optional[float] = Field(None, gt=0)
    entry_price: Optional[float] = None
    exit_price: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    fees: Optional[float] = None
    trade_date: Optional[datetime] = None
    outcome: Optional[Outcome] = None
    status: Optional[TradeStatus] = None
    confidence_level: Optional[int] = Field(None, ge=1, le=10)
    entry_reason: Optional[constr(strip_whitespace=True, min_length=1)] = None
    exit_reason: Optional[constr(strip_whitespace=True, min_length=1)] = None
    notes: Optional[str] = None
    photo: Optional[str] = None
    timeframe_photos: Optional[List[TimeframePhoto]] = None
    entry_id: Optional[int] = None
    is_greed: Optional[bool] = None
    is_fomo: Optional[bool] = None
    market_condition: Optional[MarketCondition] = None
    entry_execution: Optional[Execution] = None
    exit_execution: Optional[Execution] = None
    emotional_state: Optional[List[EmotionalState]] = None
    post_trade_thoughts: Optional[str] = None
    rule_violations: Optional[List[RuleViolation]] = None
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def _strip_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        return [tag.strip() for tag in value if tag and tag.strip()]


class TradeResponse(TradeBase):
    id: int
    trade_date: datetime
    pl: Optional[float] = None
    planned_rr: Optional[float] = None
    actual_rr: Optional[float] = None
    returns: Optional[float] = None
    tags: List[TagResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class TradeListResponse(BaseModel):
    trades: List[TradeResponse]
    pagination: Pagination


class TradeFilters(BaseModel):
    """Filters shared by the trade listing and every report."""

    model_config = ConfigDict(populate_by_name=True)

    strategy_id: Optional[int] = None
    symbol: Optional[int] = None
    portfolio_id: Optional[int] = None
    outcome: Optional[str] = None
    status: Optional[str] = None
    tags: List[int] = Field(default_factory=list)
    search: Optional[str] = None
    from_date: Optional[datetime] = Field(None, alias="from")
    to_date: Optional[datetime] = Field(None, alias="to")

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value
