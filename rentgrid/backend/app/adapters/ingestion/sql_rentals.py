# app/adapters/ingestion/sql_rentals.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.errors import UpstreamFetchFailure
from ...domain.types import RawListing
from ..repos.rentals import RentalRepository
from .base import ListingSource, listing_from_payload


@dataclass
class SqlRentalSource(ListingSource):
    """Reads the `rentals` table through RentalRepository, one short-lived session per fetch."""

    session_factory: Callable[[], Any]
    name: str = "sql"

    @classmethod
    def from_settings(cls) -> "SqlRentalSource":
        from ...db import async_session_maker

        return cls(session_factory=async_session_maker)

    async def fetch_listings(self, *, bedrooms: int | None = None) -> list[RawListing]:
        try:
            async with self.session_factory() as session:  # type: AsyncSession
                rows = await RentalRepository(session).list_for_heatmap(bedrooms)
        except SQLAlchemyError as e:
            raise UpstreamFetchFailure(self.name, f"query failed: {e}") from e

        return [
            listing_from_payload(
                {
                    "price": r.price,
                    "address": r.address,
                    "latitude": r.latitude,
                    "longitude": r.longitude,
                    "bedrooms": r.bedrooms,
                }
            )
            for r in rows
        ]
