# app/domain/assignment.py
from __future__ import annotations

import logging
import math
import random
from collections import defaultdict
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, Protocol, Sequence, TypeVar

from .address import estimate_neighborhood_from_address
from .formatting import price_display, round_half_up
from .grid import GridIndex
from .types import CellAggregate, GridCell, RawListing

log = logging.getLogger(__name__)

T = TypeVar("T")

DROP_INVALID_PRICE = "invalid_price"
DROP_OUTSIDE_GRID = "outside_grid"
DROP_UNKNOWN_NEIGHBORHOOD = "unknown_neighborhood"


class RandomSource(Protocol):
    def choice(self, seq: Sequence[T]) -> T: ...


@dataclass(frozen=True)
class AssignmentResult:
    cells: list[GridCell]
    total: int
    assigned: int
    dropped: int
    drop_reasons: dict[str, int] = field(default_factory=dict)

    def prices(self) -> list[int]:
        return [c.aggregate.price for c in self.cells]


def _valid_price(price: float | None) -> bool:
    return price is not None and math.isfinite(price) and price > 0


def assign_listings(
    cells: Sequence[GridCell],
    listings: Iterable[RawListing],
    *,
    cell_size: float,
    address_estimator: Callable[[str], str] = estimate_neighborhood_from_address,
    rng: RandomSource | None = None,
    fallback_to_address: bool = False,
) -> AssignmentResult:
    """
    Put every priced listing into exactly one cell and summarise each cell once.

      - price missing or <= 0                  -> dropped (invalid_price)
      - lat/lng present                        -> cell whose unpadded box holds the point,
                                                  else dropped (outside_grid)
      - lat/lng missing                        -> random cell carrying the neighborhood guessed
                                                  from the address, else dropped (unknown_neighborhood)

    With fallback_to_address=True, listings whose coordinates miss the grid get the
    address guess as a second chance instead of being dropped.

    Cells that receive nothing are left out of the result. Input cells are never mutated.
    """
    rng = rng or random.Random()
    index = GridIndex(cells, cell_size)

    buckets: dict[int, list[float]] = defaultdict(list)
    drop_reasons: dict[str, int] = defaultdict(int)
    total = 0

    def _by_address(address: str) -> int | None:
        label = address_estimator(address)
        candidates = index.in_neighborhood(label)
        if not candidates:
            return None
        return rng.choice(candidates)

    for listing in listings:
        total += 1

        if not _valid_price(listing.price):
            drop_reasons[DROP_INVALID_PRICE] += 1
            continue

        pos: int | None
        if listing.has_coordinates:
            pos = index.locate(lat=listing.latitude, lng=listing.longitude)  # type: ignore[arg-type]
            if pos is None and fallback_to_address:
                pos = _by_address(listing.address)
            if pos is None:
                drop_reasons[DROP_OUTSIDE_GRID] += 1
                continue
        else:
            pos = _by_address(listing.address)
            if pos is None:
                drop_reasons[DROP_UNKNOWN_NEIGHBORHOOD] += 1
                continue

        buckets[pos].append(float(listing.price))  # type: ignore[arg-type]

    out: list[GridCell] = []
    for pos, cell in enumerate(index.cells):
        prices = buckets.get(pos)
        if not prices:
            continue
        avg = round_half_up(sum(prices) / len(prices))
        out.append(
            replace(
                cell,
                aggregate=CellAggregate(price=avg, count=len(prices), price_display=price_display(avg)),
            )
        )

    assigned = sum(len(v) for v in buckets.values())
    dropped = sum(drop_reasons.values())
    log.debug(
        "assign: total=%d assigned=%d dropped=%d cells_with_data=%d reasons=%s",
        total,
        assigned,
        dropped,
        len(out),
        dict(drop_reasons),
    )
    return AssignmentResult(
        cells=out,
        total=total,
        assigned=assigned,
        dropped=dropped,
        drop_reasons=dict(drop_reasons),
    )
