# backend/app/jobs/refresh.py
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..adapters.ingestion.base import ListingSource
from ..config import settings
from ..service_layer.cache import HeatmapCache, heatmap_cache
from ..service_layer.jobruns import tracked_job
from ..service_layer.use_cases.heatmap import build_heatmap, build_listing_source

log = logging.getLogger(__name__)


def parse_bedroom_filters(raw: str | None) -> list[int | None]:
    """
    "all,0,1,2" -> [None, 0, 1, 2]. Junk entries are skipped; duplicates collapse.
    """
    out: list[int | None] = []
    for part in (raw or "").split(","):
        p = part.strip().lower()
        if not p:
            continue
        if p in ("all", "any", "none", "*"):
            val: int | None = None
        else:
            try:
                val = int(p)
            except ValueError:
                log.warning("ignoring bedroom filter %r", part)
                continue
            if val < 0:
                continue
        if val not in out:
            out.append(val)
    return out


def _filter_key(bedrooms: int | None) -> str:
    return "all" if bedrooms is None else str(bedrooms)


async def refresh_heatmaps(
    *,
    cache: HeatmapCache | None = None,
    source: ListingSource | None = None,
    filters: list[int | None] | None = None,
    regime: str | None = None,
) -> dict[str, Any]:
    """Rebuild the cached heat map for every configured bedroom filter."""
    cache = cache if cache is not None else heatmap_cache
    source = source if source is not None else build_listing_source()
    regime = regime or settings.SCALE_REGIME
    filters = filters if filters is not None else parse_bedroom_filters(settings.SCHED_BEDROOM_FILTERS)

    cells: dict[str, int] = {}
    sources: dict[str, str] = {}
    for bedrooms in filters:

        async def _build(b: int | None = bedrooms):
            return await build_heatmap(source, bedrooms=b, regime=regime)

        coll = await cache.rebuild((bedrooms, regime), _build)
        cells[_filter_key(bedrooms)] = coll.meta.cluster_count
        sources[_filter_key(bedrooms)] = coll.meta.source

    return {"refreshed": list(cells.keys()), "cells": cells, "sources": sources}


async def run_refresh_job(session: AsyncSession, **kwargs: Any) -> dict[str, Any]:
    """refresh_heatmaps wrapped in a JobRun row. Caller commits."""
    try:
        async with tracked_job(session, "heatmap_refresh") as summary:
            summary.update(await refresh_heatmaps(**kwargs))
    except Exception:
        log.exception("heatmap refresh failed")
        raise
    return summary
