# app/service_layer/use_cases/heatmap.py
from __future__ import annotations

import logging
from typing import Any

from ...adapters.ingestion.base import ListingSource
from ...adapters.ingestion.sql_rentals import SqlRentalSource
from ...adapters.ingestion.stub_json import StubJsonSource
from ...adapters.ingestion.supabase import SupabaseRentalSource
from ...config import settings
from ...domain.assignment import AssignmentResult, RandomSource, assign_listings
from ...domain.color_scale import build_scale
from ...domain.errors import ConfigurationError, UpstreamFetchFailure
from ...domain.grid import GridSpec, generate_grid_from_spec
from ...domain.types import GridCell, RawListing
from ...schemas import (
    LegendItem,
    PolygonGeometry,
    TileCollection,
    TileFeature,
    TileMeta,
    TileProperties,
)
from ..sample_data import generate_sample_listings
from .stats import legend_items

log = logging.getLogger(__name__)


def build_listing_source() -> ListingSource:
    """
    Source builder that will NOT brick local dev:
    unknown LISTINGS_SOURCE -> stub_json in dev/local/test, error in prod-like envs.
    """
    src = (settings.LISTINGS_SOURCE or "").strip().lower()

    if src == "sql":
        return SqlRentalSource.from_settings()
    if src == "stub_json":
        return StubJsonSource.from_settings()
    if src == "supabase":
        return SupabaseRentalSource.from_settings()

    if settings.ENV.lower() in ("dev", "local", "test"):
        return StubJsonSource.from_settings()

    raise ConfigurationError(f"Unknown LISTINGS_SOURCE={src!r}. Use sql, stub_json or supabase.")


def default_grid_spec() -> GridSpec:
    return GridSpec(cell_size=settings.GRID_CELL_SIZE, overlap=settings.GRID_OVERLAP)


async def fetch_with_fallback(
    source: ListingSource,
    *,
    bedrooms: int | None,
    spec: GridSpec,
    sample_seed: int,
) -> tuple[list[RawListing], str]:
    """
    (listings, source_name). A failing source is replaced by the synthetic
    sample batch, narrowed to the same bedroom filter.
    """
    try:
        listings = await source.fetch_listings(bedrooms=bedrooms)
        return listings, source.name
    except UpstreamFetchFailure as e:
        log.warning("listing source failed, serving sample data instead: %s", e)
        batch = generate_sample_listings(seed=sample_seed, spec=spec)
        return [l for l in batch if bedrooms is None or l.bedrooms == bedrooms], "sample"


def _to_feature(cell: GridCell, color: str, bedrooms: int | None) -> TileFeature:
    return TileFeature(
        properties=TileProperties(
            price=cell.aggregate.price,
            count=cell.aggregate.count,
            neighborhood=cell.neighborhood,
            price_display=cell.aggregate.price_display,
            color=color,
            beds=bedrooms,
            row=cell.row,
            col=cell.col,
            center_lat=cell.center.lat,
            center_lng=cell.center.lng,
        ),
        geometry=PolygonGeometry(coordinates=[[(p.lng, p.lat) for p in cell.bounds]]),
    )


def render_collection(
    result: AssignmentResult,
    *,
    source_name: str,
    bedrooms: int | None,
    regime: str,
) -> TileCollection:
    features: list[TileFeature] = []
    legend: list[LegendItem] = []
    domain: tuple[float, float] | None = None

    if result.cells:
        scale = build_scale(result.prices(), regime=regime)
        domain = scale.domain()
        features = [_to_feature(c, scale(c.aggregate.price), bedrooms) for c in result.cells]
        legend = [LegendItem(**it) for it in legend_items(scale)]

    return TileCollection(
        features=features,
        legend=legend,
        meta=TileMeta(
            total_listings=result.total,
            assigned=result.assigned,
            dropped=result.dropped,
            drop_reasons=result.drop_reasons,
            cluster_count=len(features),
            source=source_name,
            bedrooms=bedrooms,
            regime=regime,  # type: ignore[arg-type]
            domain=domain,
        ),
    )


async def build_heatmap(
    source: ListingSource,
    *,
    bedrooms: int | None = None,
    spec: GridSpec | None = None,
    regime: str | None = None,
    rng: RandomSource | None = None,
    sample_seed: int | None = None,
) -> TileCollection:
    """
    End-to-end heat map:

      1) fetch listings (sample batch if the source is down)
      2) generate the empty land grid
      3) assign listings and aggregate per cell
      4) color the surviving cells and build the legend
    """
    spec = spec or default_grid_spec()
    regime = regime or settings.SCALE_REGIME
    if regime not in ("discrete", "continuous"):
        raise ConfigurationError(f"Unknown color scale regime {regime!r}")

    listings, source_name = await fetch_with_fallback(
        source,
        bedrooms=bedrooms,
        spec=spec,
        sample_seed=settings.SAMPLE_SEED if sample_seed is None else sample_seed,
    )

    cells = generate_grid_from_spec(spec)
    result = assign_listings(cells, listings, cell_size=spec.cell_size, rng=rng)

    log.info(
        "heatmap[%s, bedrooms=%s]: listings=%d assigned=%d dropped=%d cells=%d/%d",
        source_name,
        bedrooms,
        result.total,
        result.assigned,
        result.dropped,
        len(result.cells),
        len(cells),
    )
    return render_collection(result, source_name=source_name, bedrooms=bedrooms, regime=regime)


def summarize(collection: TileCollection) -> dict[str, Any]:
    return {
        "source": collection.meta.source,
        "bedrooms": collection.meta.bedrooms,
        "cells": collection.meta.cluster_count,
        "assigned": collection.meta.assigned,
        "dropped": collection.meta.dropped,
        "domain": collection.meta.domain,
    }
