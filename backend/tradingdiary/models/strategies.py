from __future__ import annotations

from sqlalchemy import Column, DateTime, Float, Integer, String, Text

from tradingdiary.utils.time import utc_now

from .base import Base


class Strategy(Base):
    __tablename__ = "strategies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False)
    description = Column(Text, nullable=True)
    weekly_loss_limit = Column(Float, nullable=True)
    monthly_loss_limit = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)
