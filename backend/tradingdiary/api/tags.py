from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tradingdiary.api import deps
from tradingdiary.models.tags import Tag
from tradingdiary.schemas.tags import TagResponse

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("/", response_model=list[TagResponse])
def list_tags(search: Optional[str] = Query(None), db: Session = Depends(deps.get_db)) -> list[Tag]:
    query = db.query(Tag)
    if search:
        query = query.filter(Tag.name.ilike(f"%{search}%"))
    return query.order_by(Tag.name.asc()).all()
