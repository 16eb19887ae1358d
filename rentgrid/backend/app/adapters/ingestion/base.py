# app/adapters/ingestion/base.py
from __future__ import annotations

from typing import Any, Protocol

from ...domain.parsing import get_first, to_float, to_int, to_latitude, to_longitude
from ...domain.types import RawListing


class ListingSource(Protocol):
    name: str

    async def fetch_listings(self, *, bedrooms: int | None = None) -> list[RawListing]:
        """
        Finite batch ordered by price ascending.
        Any failure surfaces as UpstreamFetchFailure.
        """
        raise NotImplementedError


def listing_from_payload(payload: dict[str, Any]) -> RawListing:
    """
    Validate one upstream row into a RawListing.

    Prices and coordinates that are not finite numbers become None; coordinates
    outside WGS84 ranges are discarded rather than trusted. A row with only one
    of lat/lng is treated as having no coordinates.
    """
    lat = to_latitude(get_first(payload, "latitude", "lat", "Latitude"))
    lng = to_longitude(get_first(payload, "longitude", "lng", "lon", "Longitude"))
    if lat is None or lng is None:
        lat = lng = None

    address = get_first(payload, "address", "addressLine", "UnparsedAddress")
    return RawListing(
        price=to_float(get_first(payload, "price", "rent", "listPrice", "ListPrice")),
        address=str(address).strip() if address is not None else "",
        latitude=lat,
        longitude=lng,
        bedrooms=to_int(get_first(payload, "bedrooms", "beds", "BedroomsTotal")),
    )


def _price_key(listing: RawListing) -> tuple[int, float]:
    # priced rows first, ascending; unpriced rows keep their relative order at the end
    if listing.price is None:
        return (1, 0.0)
    return (0, listing.price)


def sort_by_price(listings: list[RawListing]) -> list[RawListing]:
    return sorted(listings, key=_price_key)
