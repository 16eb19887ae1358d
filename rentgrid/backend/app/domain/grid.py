# app/domain/grid.py
from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable

from .boundary import MANHATTAN_BOUNDARY, BoundaryRing, BoundingBox, point_in_polygon
from .errors import ConfigurationError
from .neighborhoods import MANHATTAN_NEIGHBORHOODS, NeighborhoodClassifier
from .types import GeoPoint, GridCell

log = logging.getLogger(__name__)

# Battery Park to Inwood, Hudson to East River
MANHATTAN_BBOX = BoundingBox(min_lat=40.695, max_lat=40.880, min_lng=-74.02, max_lng=-73.91)


@dataclass(frozen=True)
class GridSpec:
    bbox: BoundingBox = MANHATTAN_BBOX
    cell_size: float = 0.008
    # fraction of cell_size added around each tile (half per side) so neighbours overlap when drawn
    overlap: float = 0.08
    boundary: BoundaryRing = MANHATTAN_BOUNDARY
    classifier: NeighborhoodClassifier = field(default=MANHATTAN_NEIGHBORHOODS)

    def __post_init__(self) -> None:
        _validate_cell_size(self.cell_size)
        if not math.isfinite(self.overlap) or self.overlap < 0:
            raise ConfigurationError(f"overlap must be >= 0, got {self.overlap!r}")


def _validate_cell_size(cell_size: float) -> None:
    if not isinstance(cell_size, (int, float)) or not math.isfinite(cell_size) or cell_size <= 0:
        raise ConfigurationError(f"cell_size must be a positive number, got {cell_size!r}")


def padded_bounds(lower_left: GeoPoint, cell_size: float, overlap_fraction: float) -> tuple[GeoPoint, ...]:
    """Closed ring BL, BR, TR, TL, BL of the cell grown by overlap_fraction*cell_size/2 per side."""
    pad = overlap_fraction * cell_size / 2
    west = lower_left.lng - pad
    east = lower_left.lng + cell_size + pad
    south = lower_left.lat - pad
    north = lower_left.lat + cell_size + pad
    return (
        GeoPoint(west, south),
        GeoPoint(east, south),
        GeoPoint(east, north),
        GeoPoint(west, north),
        GeoPoint(west, south),
    )


def generate_grid(
    bbox: BoundingBox,
    cell_size: float,
    overlap_fraction: float,
    *,
    boundary: BoundaryRing = MANHATTAN_BOUNDARY,
    classifier: NeighborhoodClassifier = MANHATTAN_NEIGHBORHOODS,
) -> list[GridCell]:
    """
    Empty cells of a fixed lattice over `bbox`, kept only where the cell center
    falls inside `boundary`.

    Ordering is row-major: ascending latitude, then ascending longitude. Each
    corner is computed as origin + index * cell_size so rounding error never
    accumulates across the sweep.
    """
    _validate_cell_size(cell_size)
    if overlap_fraction < 0:
        raise ConfigurationError(f"overlap_fraction must be >= 0, got {overlap_fraction!r}")

    half = cell_size / 2
    cells: list[GridCell] = []
    lattice = 0

    row = 0
    while True:
        south = bbox.min_lat + row * cell_size
        if south >= bbox.max_lat:
            break
        col = 0
        while True:
            west = bbox.min_lng + col * cell_size
            if west >= bbox.max_lng:
                break
            lattice += 1
            center = GeoPoint(west + half, south + half)
            if point_in_polygon(center, boundary.vertices):
                cells.append(
                    GridCell(
                        row=row,
                        col=col,
                        center=center,
                        bounds=padded_bounds(GeoPoint(west, south), cell_size, overlap_fraction),
                        neighborhood=classifier.classify(lat=center.lat, lng=center.lng),
                    )
                )
            col += 1
        row += 1

    log.debug("grid: kept %d of %d lattice cells inside %s", len(cells), lattice, boundary.name)
    return cells


def generate_grid_from_spec(spec: GridSpec) -> list[GridCell]:
    return generate_grid(
        spec.bbox,
        spec.cell_size,
        spec.overlap,
        boundary=spec.boundary,
        classifier=spec.classifier,
    )


class GridIndex:
    """
    Point -> cell lookup over a generated grid.

    Containment is tested against lattice edges, `edge(k) = origin + k * cell_size`,
    taken once from the reference cell. Two neighbouring cells share the exact
    same edge value, so every point inside the lattice lands in exactly one
    row and column: [edge(row), edge(row + 1)) on both axes.
    """

    def __init__(self, cells: Iterable[GridCell], cell_size: float):
        _validate_cell_size(cell_size)
        self.cells: list[GridCell] = list(cells)
        self.cell_size = float(cell_size)
        self._by_key: dict[tuple[int, int], int] = {}
        self._by_hood: dict[str, list[int]] = defaultdict(list)

        for i, cell in enumerate(self.cells):
            if cell.key in self._by_key:
                raise ConfigurationError(f"Duplicate grid cell {cell.key}")
            self._by_key[cell.key] = i
            self._by_hood[cell.neighborhood].append(i)

        self._origin: GeoPoint | None = None
        if self.cells:
            ref = self.cells[0]
            half = self.cell_size / 2
            self._origin = GeoPoint(
                ref.center.lng - half - ref.col * self.cell_size,
                ref.center.lat - half - ref.row * self.cell_size,
            )

    def __len__(self) -> int:
        return len(self.cells)

    def _edge_index(self, value: float, origin: float) -> int:
        k = math.floor((value - origin) / self.cell_size)
        # the division can be off by one right at an edge; settle it on the edges themselves
        if value < origin + k * self.cell_size:
            return k - 1
        if value >= origin + (k + 1) * self.cell_size:
            return k + 1
        return k

    def locate(self, lat: float, lng: float) -> int | None:
        """Position of the containing cell in `self.cells`, or None when the point is off-grid."""
        origin = self._origin
        if origin is None or not (math.isfinite(lat) and math.isfinite(lng)):
            return None

        row = self._edge_index(lat, origin.lat)
        col = self._edge_index(lng, origin.lng)
        return self._by_key.get((row, col))

    def in_neighborhood(self, label: str) -> list[int]:
        return list(self._by_hood.get(label, ()))

    def neighborhoods(self) -> list[str]:
        return list(self._by_hood.keys())
