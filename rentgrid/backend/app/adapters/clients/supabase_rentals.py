# app/adapters/clients/supabase_rentals.py
from __future__ import annotations

from typing import Any

import httpx

from ...config import settings
from .http_resilience import resilient_request


class SupabaseRentalsClient:
    """
    Thin PostgREST client for the `rentals` table:
      GET {SUPABASE_URL}/rest/v1/rentals?select=*&order=price.asc[&bedrooms=eq.N]
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        table: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.SUPABASE_URL or "").rstrip("/")
        self.api_key = api_key or settings.SUPABASE_ANON_KEY
        self.table = table or settings.SUPABASE_RENTALS_TABLE
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise RuntimeError("SUPABASE_ANON_KEY is not configured")
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    async def fetch_rentals(self, *, bedrooms: int | None = None) -> list[dict[str, Any]]:
        if not self.base_url:
            raise RuntimeError("SUPABASE_URL is not configured")

        params: dict[str, Any] = {"select": "*", "order": "price.asc"}
        if bedrooms is not None:
            params["bedrooms"] = f"eq.{int(bedrooms)}"

        resp = await resilient_request(
            "GET",
            f"{self.base_url}/rest/v1/{self.table}",
            headers=self._headers(),
            params=params,
            transport=self.transport,
        )
        data = resp.json()
        if not isinstance(data, list):
            raise ValueError(f"Unexpected rentals payload type: {type(data).__name__}")
        return [x for x in data if isinstance(x, dict)]
