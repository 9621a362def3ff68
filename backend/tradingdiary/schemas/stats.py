from __future__ import annotations

from datetime import date as date_type, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tradingdiary.schemas.trades import TradeFilters


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PerformanceMetric(_CamelModel):
    win_rate: float = 0.0
    avg_rr: float = 0.0
    expectancy: float = 0.0
    total_trades: int = 0
    avg_confidence: float = 0.0
    consistency_score: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    total_pnl: float = 0.0
    total_returns: float = 0.0
    max_drawdown: float = 0.0


class ExecutionEfficiency(_CamelModel):
    entry_efficiency: float = 0.0
    exit_efficiency: float = 0.0


class ExecutionMistakes(_CamelModel):
    greed: int = 0
    fomo: int = 0
    rule_violations: Dict[str, int] = Field(default_factory=dict)


class ExecutionMetric(_CamelModel):
    efficiency: ExecutionEfficiency
    mistakes: ExecutionMistakes


class CalendarDay(BaseModel):
    date: date_type
    pnl: float
    returns: float
    count: int


class TimeseriesPoint(BaseModel):
    trade_date: datetime
    pl: float
    returns: float
    actual_rr: float
    confidence_level: float
    total_trades: int


class TimeseriesResponse(BaseModel):
    timeseries: List[TimeseriesPoint]


class HeatmapPoint(BaseModel):
    date: date_type
    count: int


class TreemapLeaf(BaseModel):
    name: str
    value: int


class TreemapNode(BaseModel):
    name: str
    value: int
    children: List[TreemapLeaf]


class GraphRequest(BaseModel):
    filters: Optional[TradeFilters] = None
