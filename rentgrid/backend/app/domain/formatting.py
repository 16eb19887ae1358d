# app/domain/formatting.py
from __future__ import annotations

import math


def round_half_up(x: float) -> int:
    """Round .5 away from zero for positives (matches what the map UI shows, not banker's rounding)."""
    return int(math.floor(x + 0.5))


def format_currency(amount: float) -> str:
    """USD, no cents: 4000 -> '$4,000'."""
    n = round_half_up(amount)
    if n < 0:
        return f"-${-n:,}"
    return f"${n:,}"


def price_display(amount: float) -> str:
    return f"{format_currency(amount)}/mo"
