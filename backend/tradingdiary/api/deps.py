from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException, Query

from tradingdiary.db.session import get_db
from tradingdiary.schemas.trades import TradeFilters


def _parse_tag_ids(raw: Optional[str]) -> List[int]:
    if not raw:
        return []
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Tags must be comma separated ids") from exc


def trade_filters(
    strategy_id: Optional[int] = Query(None),
    symbol: Optional[int] = Query(None),
    portfolio_id: Optional[int] = Query(None),
    outcome: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    tags: Optional[str] = Query(None, description="Comma separated tag ids"),
    search: Optional[str] = Query(None),
    from_date: Optional[datetime] = Query(None, alias="from"),
    to_date: Optional[datetime] = Query(None, alias="to"),
) -> TradeFilters:
    return TradeFilters(
        strategy_id=strategy_id,
        symbol=symbol,
        portfolio_id=portfolio_id,
        outcome=outcome,
        status=status,
        tags=_parse_tag_ids(tags),
        search=search,
        from_date=from_date,
        to_date=to_date,
    )


__all__ = ["get_db", "trade_filters"]
