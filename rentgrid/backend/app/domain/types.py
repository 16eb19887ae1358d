# app/domain/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple


class GeoPoint(NamedTuple):
    """
    WGS84 degrees, longitude FIRST (GeoJSON order).

    Every ring, polygon and lattice computation uses this order. Use the field
    names (point.lng / point.lat) instead of indexing so the convention never
    leaks into call sites.
    """

    lng: float
    lat: float


@dataclass(frozen=True)
class CellAggregate:
    price: int = 0
    count: int = 0
    price_display: str = ""


@dataclass(frozen=True)
class GridCell:
    row: int
    col: int
    center: GeoPoint
    # padded, closed ring (BL, BR, TR, TL, BL) used only for rendering
    bounds: tuple[GeoPoint, ...]
    neighborhood: str
    aggregate: CellAggregate = field(default_factory=CellAggregate)

    @property
    def key(self) -> tuple[int, int]:
        return (self.row, self.col)


@dataclass(frozen=True)
class RawListing:
    price: float | None
    address: str
    latitude: float | None
    longitude: float | None
    bedrooms: int | None = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None
