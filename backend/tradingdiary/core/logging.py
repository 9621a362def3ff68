from __future__ import annotations

from logging.config import dictConfig
from pathlib import Path

from tradingdiary.core.config import settings

LOG_DIR = Path(__file__).resolve().parents[2] / "logs"
LOG_FILE = LOG_DIR / "app.log"


def _uvicorn_logger() -> dict:
    return {
        "handlers": ["console", "file"],
        "level": "INFO",
        "propagate": False,
    }


def setup_logging() -> None:
    """Configure application-wide logging."""

    LOG_DIR.mkdir(parents=True, exist_ok=True)

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "standard",
                "filename": str(LOG_FILE),
                "maxBytes": 5 * 1024 * 1024,
                "backupCount": 5,
                "encoding": "utf-8",
            },
        },
        "loggers": {
            "uvicorn": _uvicorn_logger(),
            "uvicorn.error": _uvicorn_logger(),
            "uvicorn.access": _uvicorn_logger(),
            "apscheduler": {
                "handlers": ["console", "file"],
                "level": "WARNING",
                "propagate": False,
            },
        },
        "root": {
            "handlers": ["console", "file"],
            "level": settings.log_level.upper(),
        },
    }

    dictConfig(config)


__all__ = ["setup_logging"]
