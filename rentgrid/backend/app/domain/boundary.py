# app/domain/boundary.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from .errors import ConfigurationError
from .types import GeoPoint


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def __post_init__(self) -> None:
        if not (self.min_lat < self.max_lat and self.min_lng < self.max_lng):
            raise ConfigurationError(f"Inverted or empty bounding box: {self}")

    def contains(self, point: GeoPoint) -> bool:
        return self.min_lat <= point.lat <= self.max_lat and self.min_lng <= point.lng <= self.max_lng


def point_in_polygon(point: GeoPoint, ring: Sequence[GeoPoint]) -> bool:
    """
    Even-odd ray casting. A horizontal ray is cast east from `point`; every ring
    edge whose latitude span straddles the point and whose crossing lies east of
    it toggles the result.

    Points exactly on an edge or vertex get whatever the arithmetic yields; the
    rings used here are coastline approximations, not survey data.
    """
    n = len(ring)
    if n < 3:
        raise ConfigurationError(f"Boundary ring needs at least 3 vertices, got {n}")

    lng, lat = point.lng, point.lat
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = ring[i].lng, ring[i].lat
        xj, yj = ring[j].lng, ring[j].lat
        if (yi > lat) != (yj > lat) and lng < (xj - xi) * (lat - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


@dataclass(frozen=True)
class BoundaryRing:
    """Closed ring (first == last) of (lng, lat) vertices approximating a shoreline."""

    name: str
    vertices: tuple[GeoPoint, ...]

    def __post_init__(self) -> None:
        pts = tuple(GeoPoint(float(p[0]), float(p[1])) for p in self.vertices)
        if any(not (math.isfinite(p.lng) and math.isfinite(p.lat)) for p in pts):
            raise ConfigurationError(f"Boundary {self.name!r} has non-finite vertices")
        if len(set(pts)) < 3:
            raise ConfigurationError(
                f"Boundary {self.name!r} needs at least 3 distinct vertices, got {len(set(pts))}"
            )
        if pts[0] != pts[-1]:
            pts = pts + (pts[0],)
        object.__setattr__(self, "vertices", pts)

    @classmethod
    def from_lng_lat(cls, name: str, pairs: Iterable[tuple[float, float]]) -> "BoundaryRing":
        return cls(name=name, vertices=tuple(GeoPoint(lng, lat) for lng, lat in pairs))

    def contains(self, point: GeoPoint) -> bool:
        return point_in_polygon(point, self.vertices)

    def bbox(self) -> BoundingBox:
        lats = [p.lat for p in self.vertices]
        lngs = [p.lng for p in self.vertices]
        return BoundingBox(min_lat=min(lats), max_lat=max(lats), min_lng=min(lngs), max_lng=max(lngs))


# Battery Park, clockwise up the Hudson to Spuyten Duyvil, then back south
# along the Harlem and East rivers.
MANHATTAN_BOUNDARY = BoundaryRing.from_lng_lat(
    "manhattan",
    [
        (-74.0153, 40.7004),  # Battery Park south
        (-74.0189, 40.7032),  # Battery Park west
        (-74.0163, 40.7106),  # World Trade Center
        (-74.0131, 40.7190),  # Tribeca
        (-74.0110, 40.7268),  # SoHo
        (-74.0095, 40.7330),  # Greenwich Village
        (-74.0085, 40.7420),  # Chelsea (14th St)
        (-74.0070, 40.7525),  # Penn Station
        (-74.0055, 40.7620),  # Hell's Kitchen
        (-74.0035, 40.7720),  # Lincoln Center
        (-73.9970, 40.7810),  # 79th St
        (-73.9920, 40.7920),  # 96th St
        (-73.9685, 40.8030),  # Morningside Heights
        (-73.9625, 40.8125),  # Harlem
        (-73.9545, 40.8255),  # Washington Heights
        (-73.9385, 40.8505),  # Fort George
        (-73.9215, 40.8725),  # Inwood Hill Park
        (-73.9105, 40.8755),  # Spuyten Duyvil
        (-73.9135, 40.8680),  # Inwood (east)
        (-73.9275, 40.8450),  # Washington Heights (east)
        (-73.9340, 40.8300),  # Hamilton Heights (east)
        (-73.9360, 40.8150),  # Harlem (east)
        (-73.9385, 40.8000),  # 125th St
        (-73.9420, 40.7900),  # 110th St
        (-73.9450, 40.7820),  # 96th St (east)
        (-73.9495, 40.7720),  # 79th St (east)
        (-73.9565, 40.7620),  # 66th St
        (-73.9610, 40.7550),  # 59th St
        (-73.9650, 40.7480),  # Turtle Bay
        (-73.9685, 40.7400),  # Murray Hill
        (-73.9720, 40.7330),  # Gramercy
        (-73.9745, 40.7250),  # East Village
        (-73.9760, 40.7150),  # Lower East Side
        (-73.9985, 40.7070),  # Brooklyn Bridge
        (-74.0025, 40.7020),  # South Street Seaport
        (-74.0153, 40.7004),  # closes at Battery Park
    ],
)
