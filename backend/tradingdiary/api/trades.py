from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from tradingdiary.api import deps
from tradingdiary.models.trades import Trade
from tradingdiary.schemas.stats import CalendarDay, ExecutionMetric, PerformanceMetric
from tradingdiary.schemas.trades import (
    Pagination,
    TradeCreate,
    TradeFilters,
    TradeListResponse,
    TradeResponse,
    TradeUpdate,
)
from tradingdiary.services import stats
from tradingdiary.services.trades import (
    MAIN_PHOTO_KIND,
    TradeNotFound,
    TradeValidationError,
    create_trade,
    delete_trade,
    get_trade,
    list_trades,
    save_trade_photo,
    update_trade,
)

router = APIRouter(prefix="/trades", tags=["trades"])


def _load_trade(db: Session, trade_id: int) -> Trade:
    try:
        return get_trade(db, trade_id)
    except TradeNotFound as exc:
        raise HTTPException(status_code=404, detail="Trade not found") from exc


@router.get("/stats/performance-metric", response_model=PerformanceMetric)
def performance_metric(
    filters: TradeFilters = Depends(deps.trade_filters),
    db: Session = Depends(deps.get_db),
) -> PerformanceMetric:
    return stats.performance_metric(db, filters)


@router.get("/stats/execution-metric", response_model=ExecutionMetric)
def execution_metric(
    filters: TradeFilters = Depends(deps.trade_filters),
    db: Session = Depends(deps.get_db),
) -> ExecutionMetric:
    return stats.execution_metric(db, filters)


@router.get("/pnl/calendar", response_model=list[CalendarDay])
def pnl_calendar(
    month: Optional[int] = Query(None),
    year: Optional[int] = Query(None, ge=1900, le=9998),
    filters: TradeFilters = Depends(deps.trade_filters),
    db: Session = Depends(deps.get_db),
) -> list[CalendarDay]:
    if not month or not year:
        raise HTTPException(status_code=400, detail="Month and year are required")
    if not 1 <= month <= 12:
        raise HTTPException(status_code=400, detail="Month must be between 1 and 12")
    return stats.pnl_calendar(db, year, month, filters)


@router.get("/", response_model=TradeListResponse)
def list_trades_route(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=500),
    filters: TradeFilters = Depends(deps.trade_filters),
    db: Session = Depends(deps.get_db),
) -> TradeListResponse:
    trades, total, pages = list_trades(db, filters, page=page, limit=limit)
    return TradeListResponse(
        trades=[TradeResponse.model_validate(trade) for trade in trades],
        pagination=Pagination(total=total, page=page, limit=limit, pages=pages),
    )


@router.post("/", response_model=TradeResponse, status_code=201)
def create_trade_route(payload: TradeCreate, db: Session = Depends(deps.get_db)) -> Trade:
    try:
        return create_trade(db, payload)
    except TradeValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/{trade_id}", response_model=TradeResponse)
def get_trade_route(trade_id: int, db: Session = Depends(deps.get_db)) -> Trade:
    return _load_trade(db, trade_id)


@router.put("/{trade_id}", response_model=TradeResponse)
def update_trade_route(
    trade_id: int,
    payload: TradeUpdate,
    db: Session = Depends(deps.get_db),
) -> Trade:
    trade = _load_trade(db, trade_id)
    try:
        return update_trade(db, trade, payload)
    except TradeValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/{trade_id}/photo", response_model=TradeResponse)
def upload_trade_photo(
    trade_id: int,
    file: UploadFile = File(...),
    kind: str = Form(MAIN_PHOTO_KIND),
    db: Session = Depends(deps.get_db),
) -> Trade:
    trade = _load_trade(db, trade_id)
    content = file.file.read()
    try:
        return save_trade_photo(db, trade, kind, file.filename, content)
    except TradeValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.delete("/{trade_id}")
def delete_trade_route(trade_id: int, db: Session = Depends(deps.get_db)) -> dict[str, str]:
    trade = _load_trade(db, trade_id)
    delete_trade(db, trade)
    return {"message": "Trade deleted"}
