from __future__ import annotations

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String

from tradingdiary.utils.time import utc_now

from .base import Base


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False)
    goal_type = Column(String(16), nullable=False)
    target_amount = Column(Float, nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False, index=True)
    portfolio_ids = Column(JSON, nullable=False, default=list)
    status = Column(String(16), nullable=False, default="ACTIVE")
    is_status_edited = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)
