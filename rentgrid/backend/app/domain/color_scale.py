# app/domain/color_scale.py
from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass
from typing import Any, Iterable, Protocol

from .errors import ConfigurationError
from .formatting import round_half_up

# Multi-stop palette (cool -> hot), sampled at evenly spaced distinct prices.
DISCRETE_ANCHORS: tuple[str, ...] = (
    "#1e3a8a",
    "#2563eb",
    "#0891b2",
    "#0d9488",
    "#059669",
    "#65a30d",
    "#ca8a04",
    "#ea580c",
    "#dc2626",
    "#991b1b",
    "#450a0a",
)
# Used when there are too few distinct prices to spread the palette.
LINEAR_FALLBACK: tuple[str, str] = ("#1e3a8a", "#dc2626")
MIN_DISTINCT_FOR_STOPS = 5

# Six anchors -> five equal bands over the normalized price.
CONTINUOUS_ANCHORS: tuple[str, ...] = (
    "#1a1a2e",
    "#16537e",
    "#0f9b8e",
    "#a2d5f2",
    "#ffa726",
    "#e53935",
)

REGIMES = ("discrete", "continuous")


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    s = color.lstrip("#")
    if len(s) != 6:
        raise ConfigurationError(f"Expected #rrggbb color, got {color!r}")
    try:
        return int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16)
    except ValueError as e:
        raise ConfigurationError(f"Expected #rrggbb color, got {color!r}") from e


def rgb_to_hex(r: float, g: float, b: float) -> str:
    def _c(v: float) -> int:
        return min(255, max(0, round_half_up(v)))

    return "#{:02x}{:02x}{:02x}".format(_c(r), _c(g), _c(b))


def interpolate_color(c1: str, c2: str, t: float) -> str:
    """Straight line between two colors in RGB space, t in [0, 1]."""
    t = min(1.0, max(0.0, t))
    r1, g1, b1 = hex_to_rgb(c1)
    r2, g2, b2 = hex_to_rgb(c2)
    return rgb_to_hex(r1 + (r2 - r1) * t, g1 + (g2 - g1) * t, b1 + (b2 - b1) * t)


def equal_width_breaks(lo: float, hi: float, bands: int) -> tuple[float, ...]:
    """
    The N-1 inner edges splitting [lo, hi] into N equal-width bands.

    Named "quantiles" on the scales because that is what the legend calls them;
    they are NOT population quantiles. A zero-width domain has no inner edges.
    """
    if bands < 2 or hi <= lo:
        return ()
    step = (hi - lo) / bands
    return tuple(lo + step * k for k in range(1, bands))


class ColorScale(Protocol):
    def __call__(self, price: float) -> str: ...

    def domain(self) -> tuple[float, float]: ...

    def range(self) -> tuple[str, ...]: ...

    def quantiles(self) -> tuple[float, ...]: ...


def _checked_prices(prices: Iterable[float]) -> list[float]:
    vals = [float(p) for p in prices]
    if not vals:
        raise ConfigurationError("Cannot build a color scale from an empty price list")
    if any(not math.isfinite(v) for v in vals):
        raise ConfigurationError("Color scale prices must be finite numbers")
    return vals


@dataclass(frozen=True)
class DiscreteScale:
    """Piecewise-linear RGB interpolation through (price, color) stops."""

    stops: tuple[tuple[float, str], ...]

    @classmethod
    def from_prices(cls, prices: Iterable[float], anchors: tuple[str, ...] = DISCRETE_ANCHORS) -> "DiscreteScale":
        vals = _checked_prices(prices)
        distinct = sorted(set(vals))

        if len(distinct) < MIN_DISTINCT_FOR_STOPS:
            return cls(stops=((distinct[0], LINEAR_FALLBACK[0]), (distinct[-1], LINEAR_FALLBACK[1])))

        n = min(len(anchors), len(distinct))
        stops = []
        for i in range(n):
            idx = (i * (len(distinct) - 1)) // (n - 1)
            stops.append((distinct[idx], anchors[i]))
        return cls(stops=tuple(stops))

    def __call__(self, price: float) -> str:
        values = [v for v, _ in self.stops]
        lo, hi = values[0], values[-1]
        if hi <= lo or price <= lo:
            return self.stops[0][1]
        if price >= hi:
            return self.stops[-1][1]

        i = bisect_right(values, price) - 1
        v0, c0 = self.stops[i]
        v1, c1 = self.stops[i + 1]
        return interpolate_color(c0, c1, (price - v0) / (v1 - v0))

    def domain(self) -> tuple[float, float]:
        return self.stops[0][0], self.stops[-1][0]

    def range(self) -> tuple[str, ...]:
        return tuple(c for _, c in self.stops)

    def quantiles(self) -> tuple[float, ...]:
        lo, hi = self.domain()
        return equal_width_breaks(lo, hi, len(self.stops))

    def to_expression(self) -> list[Any]:
        """Map-style `interpolate` expression over the feature's `price` property."""
        expr: list[Any] = ["interpolate", ["linear"], ["get", "price"]]
        for value, color in self.stops:
            expr.extend([value, color])
        return expr


@dataclass(frozen=True)
class ContinuousScale:
    """Five fixed-width bands over (price - min) / (max - min), each a two-color gradient."""

    min_price: float
    max_price: float
    anchors: tuple[str, ...] = CONTINUOUS_ANCHORS

    def __post_init__(self) -> None:
        if len(self.anchors) < 2:
            raise ConfigurationError("Continuous scale needs at least two anchor colors")

    @classmethod
    def from_prices(cls, prices: Iterable[float], anchors: tuple[str, ...] = CONTINUOUS_ANCHORS) -> "ContinuousScale":
        vals = _checked_prices(prices)
        return cls(min_price=min(vals), max_price=max(vals), anchors=anchors)

    def __call__(self, price: float) -> str:
        span = self.max_price - self.min_price
        if span <= 0:
            # single price: one color, and quantiles() is empty
            return self.anchors[0]

        t = min(1.0, max(0.0, (price - self.min_price) / span))
        bands = len(self.anchors) - 1
        width = 1.0 / bands
        # an inner edge belongs to the band below it; t == 1.0 lands in the last band
        band = min(bands - 1, max(0, math.ceil(t / width) - 1))
        local = (t - band * width) / width
        return interpolate_color(self.anchors[band], self.anchors[band + 1], local)

    def domain(self) -> tuple[float, float]:
        return self.min_price, self.max_price

    def range(self) -> tuple[str, ...]:
        return tuple(self.anchors)

    def quantiles(self) -> tuple[float, ...]:
        return equal_width_breaks(self.min_price, self.max_price, len(self.anchors))


def build_scale(prices: Iterable[float], regime: str = "discrete") -> DiscreteScale | ContinuousScale:
    if regime == "discrete":
        return DiscreteScale.from_prices(prices)
    if regime == "continuous":
        return ContinuousScale.from_prices(prices)
    raise ConfigurationError(f"Unknown color scale regime {regime!r}. Use one of {REGIMES}.")
