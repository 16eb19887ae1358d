# app/service_layer/jobruns.py
from __future__ import annotations

import json
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from ..models import JobRun, JobRunStatus


async def start_job(session: AsyncSession, job_name: str) -> JobRun:
    jr = JobRun(job_name=job_name, started_at=datetime.utcnow(), status=JobRunStatus.running)
    session.add(jr)
    await session.flush()
    return jr


async def finish_job_success(session: AsyncSession, jr: JobRun, summary: dict[str, Any]) -> None:
    jr.status = JobRunStatus.success
    jr.finished_at = datetime.utcnow()
    jr.summary_json = json.dumps(summary, default=str)
    jr.error = None
    await session.flush()


async def finish_job_fail(session: AsyncSession, jr: JobRun, err: Exception) -> None:
    jr.status = JobRunStatus.failed
    jr.finished_at = datetime.utcnow()
    jr.error = str(err) or type(err).__name__
    await session.flush()


@asynccontextmanager
async def tracked_job(session: AsyncSession, job_name: str) -> AsyncIterator[dict[str, Any]]:
    """
    Wrap a block in a JobRun row. The block fills the yielded dict; it becomes
    summary_json on success. Exceptions mark the run failed and propagate.
    Flushes only; the caller owns the commit.
    """
    jr = await start_job(session, job_name)
    summary: dict[str, Any] = {}
    try:
        yield summary
    except Exception as e:
        await finish_job_fail(session, jr, e)
        raise
    await finish_job_success(session, jr, summary)
