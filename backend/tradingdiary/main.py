from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from tradingdiary.api import goals, graphs, health, portfolios, strategies, symbols, tags, trades
from tradingdiary.core.config import settings
from tradingdiary.core.logging import setup_logging
from tradingdiary.db import base  # noqa: F401
from tradingdiary.db.migration import run_migrations
from tradingdiary.db.session import SessionLocal
from tradingdiary.utils.time import LOCAL_TZ
from tradingdiary.workers.goals import run_goal_expiry

setup_logging()

scheduler = AsyncIOScheduler(timezone=LOCAL_TZ)


@asynccontextmanager
async def lifespan(app: FastAPI):
    run_migrations()
    if not scheduler.running:
        scheduler.start()
        trigger = CronTrigger(
            hour=settings.goal_expiry_hour,
            minute=settings.goal_expiry_minute,
            timezone=LOCAL_TZ,
        )
        scheduler.add_job(schedule_goal_expiry, trigger=trigger, id="goal_expiry", replace_existing=True)
    yield
    if scheduler.running:
        scheduler.shutdown()


async def schedule_goal_expiry():
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, _goal_expiry_job)


def _goal_expiry_job():
    db = SessionLocal()
    try:
        run_goal_expiry(db)
    finally:
        db.close()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_upload_dir = Path(settings.upload_dir)
_upload_dir.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(_upload_dir)), name="uploads")


@app.get("/")
def root():
    return {"app": settings.app_name}


app.include_router(health.router)
app.include_router(trades.router, prefix="/api")
app.include_router(graphs.router, prefix="/api")
app.include_router(strategies.router, prefix="/api")
app.include_router(symbols.router, prefix="/api")
app.include_router(portfolios.router, prefix="/api")
app.include_router(goals.router, prefix="/api")
app.include_router(tags.router, prefix="/api")
