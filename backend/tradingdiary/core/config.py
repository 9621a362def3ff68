from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Trading Diary"
    database_url: str = Field("sqlite:///./tradingdiary.db", env="DATABASE_URL")
    tz: str = Field("Asia/Kolkata", env="TZ")

    upload_dir: str = Field("uploads", env="UPLOAD_DIR")

    goal_expiry_hour: int = 0
    goal_expiry_minute: int = 5

    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])

    log_level: str = Field("INFO", env="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    @field_validator("database_url", mode="before")
    def expand_sqlite_path(cls, v: str) -> str:
        if v.startswith("sqlite") and "///" in v and not v.startswith("sqlite:////"):
            path = v.split("///", 1)[1]
            if path and not path.startswith("/"):
                abs_path = Path(os.getcwd()) / path
                return f"sqlite:///{abs_path}"
        return v


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
