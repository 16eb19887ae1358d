# app/adapters/ingestion/stub_json.py
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ...config import settings
from ...domain.errors import UpstreamFetchFailure
from ...domain.parsing import to_int
from ...domain.types import RawListing
from .base import ListingSource, listing_from_payload, sort_by_price


def _as_list_of_dicts(payload: Any) -> list[dict[str, Any]]:
    """
    Accept either:
      - list[dict]
      - {"value": list[dict]} (PostgREST/OData-style export)
    """
    if isinstance(payload, list):
        return [x for x in payload if isinstance(x, dict)]
    if isinstance(payload, dict):
        v = payload.get("value")
        if isinstance(v, list):
            return [x for x in v if isinstance(x, dict)]
    return []


@dataclass
class StubJsonSource(ListingSource):
    """
    Offline listing source for development/testing.

    Reads a rentals export from a single JSON fixture (default: data/rentals.json).
    A missing fixture means "no listings"; an unreadable one is an upstream failure.
    """

    path: Path
    name: str = "stub_json"

    @classmethod
    def from_settings(cls) -> "StubJsonSource":
        # uvicorn is typically launched from backend/, so this is backend/data/rentals.json
        return cls(path=Path(settings.STUB_LISTINGS_PATH))

    async def fetch_listings(self, *, bedrooms: int | None = None) -> list[RawListing]:
        if not self.path.exists():
            return []

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise UpstreamFetchFailure(self.name, f"cannot read {self.path}: {e}") from e

        items = _as_list_of_dicts(raw)
        if bedrooms is not None:
            items = [it for it in items if to_int(it.get("bedrooms", it.get("beds"))) == bedrooms]

        return sort_by_price([listing_from_payload(it) for it in items])
