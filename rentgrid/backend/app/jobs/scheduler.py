# app/jobs/scheduler.py
from __future__ import annotations

import logging
from typing import Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from ..config import settings
from ..db import async_session
from .refresh import run_refresh_job

log = logging.getLogger(__name__)


async def refresh_once() -> dict[str, Any]:
    async with async_session() as session:
        try:
            res = await run_refresh_job(session)
        finally:
            # persist the JobRun row whether the refresh worked or not
            await session.commit()
    log.info("heatmap cache refreshed: %s", res["cells"])
    return res


def build_scheduler() -> AsyncIOScheduler:
    sched = AsyncIOScheduler()

    minutes = max(1, int(settings.SCHED_REFRESH_INTERVAL_MINUTES))
    # coroutine jobs run on the event loop via the default AsyncIOExecutor
    sched.add_job(refresh_once, "interval", minutes=minutes, id="heatmap_refresh", max_instances=1)

    return sched
