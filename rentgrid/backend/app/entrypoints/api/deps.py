# app/entrypoints/api/deps.py
from __future__ import annotations

from fastapi import HTTPException, Query

from ...adapters.ingestion.base import ListingSource
from ...service_layer.cache import HeatmapCache, heatmap_cache
from ...service_layer.use_cases.heatmap import build_listing_source


def listing_source_dep() -> ListingSource:
    # overridden in tests via app.dependency_overrides
    return build_listing_source()


def cache_dep() -> HeatmapCache:
    return heatmap_cache


def bedrooms_dep(
    bedrooms: str | None = Query(None, description="0 = studio; 'all' or omitted = every listing"),
) -> int | None:
    if bedrooms is None or bedrooms.strip().lower() in ("", "all"):
        return None
    try:
        n = int(bedrooms)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid bedrooms: {bedrooms}")
    if n < 0 or n > 10:
        raise HTTPException(status_code=400, detail=f"Invalid bedrooms: {bedrooms}")
    return n
