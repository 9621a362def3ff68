from __future__ import annotations

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from tradingdiary.utils.time import utc_now

from .base import Base
from .tags import Tag


trade_tags = Table(
    "trade_tags",
    Base.metadata,
    Column("trade_id", Integer, ForeignKey("trades.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Trade(Base):
    __tablename__ = "trades"

    id = Column(Integer, primary_key=True, index=True)
    portfolio_id = Column(Integer, nullable=True, index=True)
    strategy_id = Column(Integer, nullable=False, index=True)
    symbol_id = Column(Integer, nullable=False, index=True)

    type = Column(String(8), nullable=False)
    quantity = Column(Float, nullable=False)
    entry_price = Column(Float, nullable=False)
    exit_price = Column(Float, nullable=True)
    stop_loss = Column(Float, nullable=True)
    take_profit = Column(Float, nullable=True)
    fees = Column(Float, nullable=True, default=0.0)

    pl = Column(Float, nullable=True)
    planned_rr = Column(Float, nullable=True)
    actual_rr = Column(Float, nullable=True)
    returns = Column(Float, nullable=True)

    trade_date = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
    outcome = Column(String(16), nullable=False)
    status = Column(String(8), nullable=True)
    confidence_level = Column(Integer, nullable=True)
    entry_reason = Column(Text, nullable=False)
    exit_reason = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)
    photo = Column(String(512), nullable=True)
    timeframe_photos = Column(JSON, nullable=False, default=list)
    entry_id = Column(Integer, nullable=True)

    is_greed = Column(Boolean, nullable=False, default=False)
    is_fomo = Column(Boolean, nullable=False, default=False)
    market_condition = Column(String(16), nullable=True)
    entry_execution = Column(String(16), nullable=True)
    exit_execution = Column(String(16), nullable=True)
    emotional_state = Column(JSON, nullable=False, default=list)
    post_trade_thoughts = Column(Text, nullable=True)
    rule_violations = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    tags = relationship(Tag, secondary=trade_tags, lazy="selectin", order_by=Tag.name)
