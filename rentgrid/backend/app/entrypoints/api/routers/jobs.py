# app/entrypoints/api/routers/jobs.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import cache_dep, listing_source_dep
from ....adapters.ingestion.base import ListingSource
from ....db import get_session
from ....domain.errors import ConfigurationError
from ....jobs.refresh import parse_bedroom_filters, run_refresh_job
from ....schemas import RefreshResult
from ....service_layer.cache import HeatmapCache

router = APIRouter(tags=["jobs"])


@router.post("/jobs/refresh", response_model=RefreshResult)
async def jobs_refresh(
    bedrooms: str | None = Query(None, description="Comma-separated filters, e.g. all,0,1,2"),
    regime: str | None = Query(None),
    source: ListingSource = Depends(listing_source_dep),
    cache: HeatmapCache = Depends(cache_dep),
    session: AsyncSession = Depends(get_session),
) -> RefreshResult:
    filters = parse_bedroom_filters(bedrooms) if bedrooms else None
    try:
        res = await run_refresh_job(session, cache=cache, source=source, filters=filters, regime=regime)
    except ConfigurationError as e:
        await session.commit()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        await session.commit()
        raise
    await session.commit()
    return RefreshResult(**res)
