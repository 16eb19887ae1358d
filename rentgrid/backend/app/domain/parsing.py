# app/domain/parsing.py
from __future__ import annotations

import math
from typing import Any


def to_int(x: Any) -> int | None:
    if x is None or x == "":
        return None
    try:
        return int(float(x))
    except (TypeError, ValueError, OverflowError):
        return None


def to_float(x: Any) -> float | None:
    """Finite float or None. Strings like '$3,200' are accepted (scraped prices)."""
    if x is None or x == "" or isinstance(x, bool):
        return None
    if isinstance(x, str):
        x = x.replace("$", "").replace(",", "").strip()
        if not x:
            return None
    try:
        v = float(x)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(v):
        return None
    return v


def to_latitude(x: Any) -> float | None:
    v = to_float(x)
    if v is None or not (-90.0 <= v <= 90.0):
        return None
    return v


def to_longitude(x: Any) -> float | None:
    v = to_float(x)
    if v is None or not (-180.0 <= v <= 180.0):
        return None
    return v


def get_first(payload: dict[str, Any], *keys: str) -> Any:
    """Return first non-empty key from payload."""
    for k in keys:
        v = payload.get(k)
        if v is None:
            continue
        if isinstance(v, str) and not v.strip():
            continue
        return v
    return None
