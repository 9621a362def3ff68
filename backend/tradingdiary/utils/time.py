from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple

import pytz
from dateutil import tz

from tradingdiary.core.config import settings


LOCAL_TZ = pytz.timezone(settings.tz)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_local(dt: datetime) -> datetime:
    # SQLite hands back naive values; they are stored as UTC.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz.UTC)
    return dt.astimezone(LOCAL_TZ)


def to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        dt = LOCAL_TZ.localize(dt)
    return dt.astimezone(tz.UTC)


def local_day_start(day: date) -> datetime:
    return to_utc(LOCAL_TZ.localize(datetime.combine(day, time.min)))


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """Return the UTC instants delimiting a local calendar month, end exclusive."""
    last_day = calendar.monthrange(year, month)[1]
    start = local_day_start(date(year, month, 1))
    end = local_day_start(date(year, month, last_day) + timedelta(days=1))
    return start, end


def week_bounds(reference: datetime) -> Tuple[datetime, datetime]:
    """ISO week (Monday based) containing ``reference`` in local time, end exclusive."""
    local_day = to_local(reference).date()
    monday = local_day - timedelta(days=local_day.weekday())
    return local_day_start(monday), local_day_start(monday + timedelta(days=7))
