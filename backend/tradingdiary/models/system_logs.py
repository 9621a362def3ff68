from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, Text

from tradingdiary.utils.time import utc_now

from .base import Base


class SystemLog(Base):
    """Operational event written by :func:`tradingdiary.services.system_logs.record_log`."""

    __tablename__ = "system_logs"

    id = Column(Integer, primary_key=True)
    ts = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
    level = Column(String(16), nullable=False)
    component = Column(String(64), nullable=False, index=True)
    message = Column(String(255), nullable=False)
    # JSON encoded, keys sorted
    meta_json = Column(Text, nullable=True)
