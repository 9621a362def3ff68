from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tradingdiary.api import deps
from tradingdiary.schemas.stats import GraphRequest, HeatmapPoint, TimeseriesResponse, TreemapNode
from tradingdiary.services import stats

router = APIRouter(prefix="/graphs", tags=["graphs"])


@router.post("/timeseries", response_model=TimeseriesResponse)
def timeseries(payload: GraphRequest, db: Session = Depends(deps.get_db)) -> TimeseriesResponse:
    return TimeseriesResponse(timeseries=stats.timeseries(db, payload.filters))


@router.post("/heatmap", response_model=list[HeatmapPoint])
def heatmap(payload: GraphRequest, db: Session = Depends(deps.get_db)) -> list[HeatmapPoint]:
    return stats.heatmap(db, payload.filters)


@router.post("/treemap", response_model=list[TreemapNode])
def treemap(payload: GraphRequest, db: Session = Depends(deps.get_db)) -> list[TreemapNode]:
    return stats.treemap(db, payload.filters)
