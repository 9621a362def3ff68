from __future__ import annotations

import json
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from tradingdiary.models.system_logs import SystemLog
from tradingdiary.utils.time import utc_now


logger = logging.getLogger("system")


def record_log(db: Session, level: str, component: str, message: str, meta: Dict[str, Any] | None = None) -> None:
    """Persist a structured log entry in the database."""

    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO
    meta_json = json.dumps(meta, ensure_ascii=False, sort_keys=True, default=str) if meta else None

    if meta_json:
        logger.log(log_level, "%s | %s | meta=%s", component, message, meta_json)
    else:
        logger.log(log_level, "%s | %s", component, message)

    db.add(
        SystemLog(
            ts=utc_now(),
            level=level.upper(),
            component=component,
            message=message,
            meta_json=meta_json,
        )
    )
    db.commit()
