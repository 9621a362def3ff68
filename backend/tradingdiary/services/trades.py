from __future__ import annotations

import logging
import math
import uuid
from pathlib import Path
from typing import Iterable, List, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from tradingdiary.core.config import settings
from tradingdiary.models.tags import Tag
from tradingdiary.models.trades import Trade
from tradingdiary.schemas.trades import TradeCreate, TradeFilters, TradeUpdate
from tradingdiary.services.trade_metrics import apply_trade_metrics
from tradingdiary.utils.time import to_utc, utc_now


logger = logging.getLogger(__name__)

MAIN_PHOTO_KIND = "photo"
_ALLOWED_PHOTO_SUFFIXES = {".png", ".jpg", ".jpeg", ".gif", ".webp"}
_REQUIRED_FIELDS = (
    "strategy_id",
    "symbol_id",
    "type",
    "quantity",
    "entry_price",
    "outcome",
    "entry_reason",
    "exit_reason",
    "is_greed",
    "is_fomo",
)


class TradeValidationError(ValueError):
    pass


class TradeNotFound(LookupError):
    pass


def check_trade_risk(trade: Trade) -> None:
    """Reject a stop loss sitting exactly on the entry price (zero risk)."""

    if trade.stop_loss is not None and trade.entry_price is not None and trade.stop_loss == trade.entry_price:
        raise TradeValidationError("Stop loss cannot be equal to entry price")


def resolve_tags(db: Session, names: Iterable[str]) -> List[Tag]:
    tags: List[Tag] = []
    seen: set[str] = set()
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        tag = db.query(Tag).filter(Tag.name == name).first()
        if tag is None:
            tag = Tag(name=name)
            db.add(tag)
            db.flush()
            logger.info("Created tag %r", name)
        tags.append(tag)
    return tags


def build_trade_query(db: Session, filters: TradeFilters | None) -> Query:
    query = db.query(Trade)
    if filters is None:
        return query

    if filters.strategy_id is not None:
        query = query.filter(Trade.strategy_id == filters.strategy_id)
    if filters.symbol is not None:
        query = query.filter(Trade.symbol_id == filters.symbol)
    if filters.portfolio_id is not None:
        query = query.filter(Trade.portfolio_id == filters.portfolio_id)
    if filters.outcome:
        query = query.filter(Trade.outcome == filters.outcome)
    if filters.status:
        query = query.filter(Trade.status == filters.status)
    if filters.tags:
        query = query.filter(Trade.tags.any(Tag.id.in_(filters.tags)))
    if filters.search:
        pattern = f"%{filters.search}%"
        query = query.filter(
            or_(
                Trade.entry_reason.ilike(pattern),
                Trade.exit_reason.ilike(pattern),
                Trade.notes.ilike(pattern),
            )
        )
    if filters.from_date is not None:
        query = query.filter(Trade.trade_date >= to_utc(filters.from_date))
    if filters.to_date is not None:
        query = query.filter(Trade.trade_date <= to_utc(filters.to_date))
    return query


def list_trades(db: Session, filters: TradeFilters, page: int = 1, limit: int = 20) -> Tuple[List[Trade], int, int]:
    query = build_trade_query(db, filters)
    total = query.count()
    trades = (
        query.order_by(Trade.created_at.desc(), Trade.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    pages = math.ceil(total / limit) if limit else 0
    return trades, total, pages


def get_trade(db: Session, trade_id: int) -> Trade:
    trade = db.get(Trade, trade_id)
    if trade is None:
        raise TradeNotFound(trade_id)
    return trade


def _persist(db: Session, trade: Trade) -> Trade:
    try:
        check_trade_risk(trade)
    except TradeValidationError:
        db.rollback()
        raise
    apply_trade_metrics(trade)
    db.add(trade)
    db.commit()
    db.refresh(trade)
    return trade


def create_trade(db: Session, payload: TradeCreate) -> Trade:
    data = payload.model_dump(exclude={"tags"})
    data["trade_date"] = to_utc(data["trade_date"]) if data.get("trade_date") else utc_now()
    if data.get("fees") is None:
        data["fees"] = 0.0

    trade = Trade(**data)
    trade.tags = resolve_tags(db, payload.tags)
    trade = _persist(db, trade)
    logger.info("Trade %s created (pl=%s)", trade.id, trade.pl)
    return trade


def update_trade(db: Session, trade: Trade, payload: TradeUpdate) -> Trade:
    data = payload.model_dump(exclude_unset=True)
    tag_names = data.pop("tags", None)

    cleared = [field for field in _REQUIRED_FIELDS if field in data and data[field] is None]
    if cleared:
        raise TradeValidationError(f"{', '.join(cleared)} cannot be empty")

    if data.get("trade_date") is not None:
        data["trade_date"] = to_utc(data["trade_date"])
    elif "trade_date" in data:
        data.pop("trade_date")

    if "fees" in data and data["fees"] is None:
        data["fees"] = 0.0
    for field in ("timeframe_photos", "emotional_state", "rule_violations"):
        if field in data and data[field] is None:
            data[field] = []

    for field, value in data.items():
        setattr(trade, field, value)

    if tag_names is not None:
        trade.tags = resolve_tags(db, tag_names)

    trade = _persist(db, trade)
    logger.info("Trade %s updated (pl=%s)", trade.id, trade.pl)
    return trade


def delete_trade(db: Session, trade: Trade) -> None:
    db.delete(trade)
    db.commit()
    logger.info("Trade %s deleted", trade.id)


def save_trade_photo(db: Session, trade: Trade, kind: str, filename: str | None, content: bytes) -> Trade:
    """Store an uploaded screenshot and attach it to the trade.

    ``kind`` is either ``photo`` for the main screenshot or the timeframe label
    (``1h``, ``daily``...) the picture belongs to.
    """

    suffix = Path(filename or "").suffix.lower()
    if suffix not in _ALLOWED_PHOTO_SUFFIXES:
        raise TradeValidationError("Unsupported image format")

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    target = upload_dir / f"trade_{trade.id}_{uuid.uuid4().hex}{suffix}"
    target.write_bytes(content)
    stored_path = f"{upload_dir.name}/{target.name}"

    if kind == MAIN_PHOTO_KIND:
        trade.photo = stored_path
    else:
        photos = [dict(item) for item in (trade.timeframe_photos or []) if item.get("type") != kind]
        photos.append({"type": kind, "photo": stored_path})
        trade.timeframe_photos = photos

    db.add(trade)
    db.commit()
    db.refresh(trade)
    logger.info("Stored %s screenshot for trade %s at %s", kind, trade.id, stored_path)
    return trade


__all__ = [
    "TradeNotFound",
    "TradeValidationError",
    "build_trade_query",
    "check_trade_risk",
    "create_trade",
    "delete_trade",
    "get_trade",
    "list_trades",
    "resolve_tags",
    "save_trade_photo",
]
