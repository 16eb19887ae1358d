# app/entrypoints/api/routers/heatmap.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..deps import bedrooms_dep, cache_dep, listing_source_dep
from ....adapters.ingestion.base import ListingSource
from ....config import settings
from ....domain.errors import ConfigurationError
from ....schemas import LegendItem, TileCollection
from ....service_layer.cache import HeatmapCache
from ....service_layer.use_cases.heatmap import build_heatmap

router = APIRouter(tags=["heatmap"])


async def _cached_heatmap(
    cache: HeatmapCache,
    source: ListingSource,
    bedrooms: int | None,
    regime: str | None,
) -> TileCollection:
    regime = (regime or settings.SCALE_REGIME).strip().lower()

    async def _build() -> TileCollection:
        return await build_heatmap(source, bedrooms=bedrooms, regime=regime)

    try:
        return await cache.get_or_build((bedrooms, regime), _build)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/heatmap", response_model=TileCollection)
async def heatmap(
    bedrooms: int | None = Depends(bedrooms_dep),
    regime: str | None = Query(None, description="discrete | continuous"),
    source: ListingSource = Depends(listing_source_dep),
    cache: HeatmapCache = Depends(cache_dep),
) -> TileCollection:
    return await _cached_heatmap(cache, source, bedrooms, regime)


@router.get("/heatmap/legend", response_model=list[LegendItem])
async def heatmap_legend(
    bedrooms: int | None = Depends(bedrooms_dep),
    regime: str | None = Query(None, description="discrete | continuous"),
    source: ListingSource = Depends(listing_source_dep),
    cache: HeatmapCache = Depends(cache_dep),
) -> list[LegendItem]:
    coll = await _cached_heatmap(cache, source, bedrooms, regime)
    return coll.legend
