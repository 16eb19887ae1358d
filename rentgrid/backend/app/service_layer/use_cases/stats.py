# app/service_layer/use_cases/stats.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ...domain.color_scale import ColorScale
from ...domain.formatting import format_currency, round_half_up


@dataclass(frozen=True)
class _Bucket:
    color: str
    lo: float
    hi: float
    tier: str

    @property
    def label(self) -> str:
        return f"{format_currency(self.lo)} - {format_currency(self.hi)}"

    def as_dict(self) -> dict:
        return {"color": self.color, "label": self.label, "tier": self.tier, "range": (self.lo, self.hi)}


def price_stats(prices: Iterable[float | None]) -> dict[str, float | int]:
    """min/max/avg over positive prices; all zeros when there are none."""
    vals = [float(p) for p in prices if p is not None and p > 0]
    if not vals:
        return {"min": 0, "max": 0, "avg": 0, "count": 0}
    return {
        "min": min(vals),
        "max": max(vals),
        "avg": round_half_up(sum(vals) / len(vals)),
        "count": len(vals),
    }


def _tier(i: int, n: int) -> str:
    if i == 0:
        return "Lowest"
    if i == n - 1:
        return "Highest"
    if i == 1:
        return "Low"
    if i == n - 2:
        return "High"
    return "Medium"


def legend_items(scale: ColorScale) -> list[dict]:
    """
    One row per range color, bounded by the scale's equal-width breakpoints:
    first row starts at domain min, last row ends at domain max. A single-price
    scale paints everything in its first color, so it gets a single row.
    """
    colors = scale.range()
    lo, hi = scale.domain()
    breaks = scale.quantiles()
    if not breaks and hi <= lo:
        colors = colors[:1]
    edges = [lo, *breaks, hi]
    n = len(colors)
    return [_Bucket(color=colors[i], lo=edges[i], hi=edges[i + 1], tier=_tier(i, n)).as_dict() for i in range(n)]
