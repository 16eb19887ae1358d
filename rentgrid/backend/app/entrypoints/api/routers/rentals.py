# app/entrypoints/api/routers/rentals.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps import bedrooms_dep, listing_source_dep
from ....adapters.ingestion.base import ListingSource
from ....config import settings
from ....schemas import PriceStats
from ....service_layer.use_cases.heatmap import default_grid_spec, fetch_with_fallback
from ....service_layer.use_cases.stats import price_stats

router = APIRouter(tags=["rentals"])


@router.get("/rentals/stats", response_model=PriceStats)
async def rentals_stats(
    bedrooms: int | None = Depends(bedrooms_dep),
    source: ListingSource = Depends(listing_source_dep),
) -> PriceStats:
    # same fallback as the heat map: a down source reports sample-batch stats, never an error
    listings, _ = await fetch_with_fallback(
        source,
        bedrooms=bedrooms,
        spec=default_grid_spec(),
        sample_seed=settings.SAMPLE_SEED,
    )
    return PriceStats(**price_stats(l.price for l in listings))
