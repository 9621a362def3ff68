from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from tradingdiary.services.goals import expire_goals
from tradingdiary.services.system_logs import record_log
from tradingdiary.utils.time import utc_now


def run_goal_expiry(db: Session, now: datetime | None = None) -> int:
    now = now or utc_now()
    record_log(db, "INFO", "goals", "Goal expiry started")
    expired = expire_goals(db, now)
    record_log(
        db,
        "INFO",
        "goals",
        "Goal expiry completed",
        meta={"expired": expired, "as_of": now.isoformat()},
    )
    return expired
