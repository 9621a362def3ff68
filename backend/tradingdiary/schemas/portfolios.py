from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, constr


class PortfolioBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: constr(strip_whitespace=True, min_length=1)
    balance: float = 0.0
    is_testing: bool = False


class PortfolioCreate(PortfolioBase):
    pass


class PortfolioUpdate(BaseModel):
    name: Optional[constr(strip_whitespace=True, min_length=1)] = None
    balance: Optional[float] = None
    is_testing: Optional[bool] = None


class PortfolioResponse(PortfolioBase):
    id: int
    created_at: datetime
    updated_at: datetime


class PortfolioTransactionCreate(BaseModel):
    type: Literal["PAYIN", "PAYOUT"]
    amount: float = Field(..., ge=0)
    before_open: bool = False
    trade_id: Optional[int] = None
    note: Optional[str] = None


class PortfolioTransactionResponse(PortfolioTransactionCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    portfolio_id: int
    created_at: datetime


class PortfolioSummary(BaseModel):
    portfolio_id: int
    name: str
    balance: float
    realized_pnl: float
    equity: float
    total_trades: int
    closed_trades: int
