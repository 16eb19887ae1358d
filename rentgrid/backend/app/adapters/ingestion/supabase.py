# app/adapters/ingestion/supabase.py
from __future__ import annotations

from dataclasses import dataclass

import httpx

from ...domain.errors import UpstreamFetchFailure
from ...domain.types import RawListing
from ..clients.supabase_rentals import SupabaseRentalsClient
from .base import ListingSource, listing_from_payload


@dataclass
class SupabaseRentalSource(ListingSource):
    client: SupabaseRentalsClient
    name: str = "supabase"

    @classmethod
    def from_settings(cls) -> "SupabaseRentalSource":
        return cls(client=SupabaseRentalsClient())

    async def fetch_listings(self, *, bedrooms: int | None = None) -> list[RawListing]:
        try:
            rows = await self.client.fetch_rentals(bedrooms=bedrooms)
        except (httpx.HTTPError, RuntimeError, ValueError) as e:
            raise UpstreamFetchFailure(self.name, str(e)) from e
        return [listing_from_payload(r) for r in rows]
