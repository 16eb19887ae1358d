# app/adapters/repos/rentals.py
from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.formatting import price_display
from ...domain.parsing import get_first, to_float, to_int, to_latitude, to_longitude
from ...models import Rental


class RentalRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_for_heatmap(self, bedrooms: int | None = None) -> list[Rental]:
        """Rentals ordered by price ascending, optionally for one bedroom count."""
        q = select(Rental)
        if bedrooms is not None:
            q = q.where(Rental.bedrooms == bedrooms)
        q = q.order_by(Rental.price.asc(), Rental.id.asc())
        return list((await self.session.execute(q)).scalars().all())

    async def upsert_from_payload(self, payload: dict[str, Any]) -> tuple[Rental, bool]:
        """
        Upsert on (address, source). Accepts scraper keys (`price`, `latitude`)
        and short aliases (`rent`, `lat`, `lng`/`lon`).

        Returns (rental, was_created).
        """
        address = str(get_first(payload, "address", "addressLine", "street") or "").strip()
        if not address:
            raise ValueError(f"Missing address for rental upsert. keys={sorted(payload.keys())[:25]}")

        source = str(payload.get("source") or "manual").strip()

        q = select(Rental).where(Rental.address == address, Rental.source == source)
        rental = (await self.session.execute(q)).scalars().first()
        created = rental is None
        if rental is None:
            rental = Rental(address=address, source=source)
            self.session.add(rental)

        price = to_float(get_first(payload, "price", "rent"))
        rental.price = price
        rental.price_display = str(payload.get("price_display") or (price_display(price) if price else ""))

        beds = to_int(get_first(payload, "bedrooms", "beds"))
        rental.bedrooms = beds
        rental.bedrooms_display = str(
            payload.get("bedrooms_display") or ("Studio" if beds == 0 else f"{beds} bed" if beds else "")
        )
        rental.bathrooms = _opt_str(payload.get("bathrooms"))
        rental.sqft = _opt_str(payload.get("sqft"))
        rental.url = str(payload.get("url") or "")
        rental.listing_source = _opt_str(payload.get("listing_source"))
        rental.scraped_date = _opt_str(payload.get("scraped_date"))

        rental.latitude = to_latitude(get_first(payload, "latitude", "lat"))
        rental.longitude = to_longitude(get_first(payload, "longitude", "lng", "lon"))

        rental.updated_at = datetime.utcnow()
        await self.session.flush()
        return rental, created


def _opt_str(x: Any) -> str | None:
    if x is None:
        return None
    s = str(x).strip()
    return s or None
