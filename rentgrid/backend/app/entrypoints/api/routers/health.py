# app/entrypoints/api/routers/health.py
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import cache_dep
from ....config import settings
from ....db import get_session, ping
from ....service_layer.cache import HeatmapCache

log = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(
    cache: HeatmapCache = Depends(cache_dep),
    session: AsyncSession = Depends(get_session),
) -> dict[str, Any]:
    try:
        db_ok = await ping(session)
    except (SQLAlchemyError, OSError) as e:
        log.warning("health: database unreachable: %s", e)
        db_ok = False
    return {
        "status": "ok",
        "db": db_ok,
        "listings_source": settings.LISTINGS_SOURCE,
        "cached_heatmaps": len(cache),
    }


@router.get("/debug/config")
def debug_config() -> dict[str, Any]:
    def _redact(v: str | None) -> str | None:
        if not v:
            return v
        if len(v) <= 8:
            return "***"
        return v[:4] + "***" + v[-4:]

    return {
        "ENV": settings.ENV,
        "LISTINGS_SOURCE": settings.LISTINGS_SOURCE,
        "STUB_LISTINGS_PATH": settings.STUB_LISTINGS_PATH,
        "SUPABASE_URL": settings.SUPABASE_URL,
        "SUPABASE_ANON_KEY": _redact(settings.SUPABASE_ANON_KEY),
        "GRID_CELL_SIZE": settings.GRID_CELL_SIZE,
        "GRID_OVERLAP": settings.GRID_OVERLAP,
        "SCALE_REGIME": settings.SCALE_REGIME,
        "CACHE_TTL_S": settings.CACHE_TTL_S,
        "SCHED_BEDROOM_FILTERS": settings.SCHED_BEDROOM_FILTERS,
    }
