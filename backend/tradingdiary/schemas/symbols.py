from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, constr


class SymbolBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    symbol: constr(strip_whitespace=True, min_length=1)
    name: constr(strip_whitespace=True, min_length=1)


class SymbolCreate(SymbolBase):
    pass


class SymbolUpdate(BaseModel):
    symbol: Optional[constr(strip_whitespace=True, min_length=1)] = None
    name: Optional[constr(strip_whitespace=True, min_length=1)] = None


class SymbolResponse(SymbolBase):
    id: int
    created_at: datetime
    updated_at: datetime
