# app/service_layer/sample_data.py
from __future__ import annotations

import random

from sqlalchemy.ext.asyncio import AsyncSession

from ..adapters.repos.rentals import RentalRepository
from ..domain.formatting import round_half_up
from ..domain.grid import GridSpec, generate_grid_from_spec
from ..domain.types import RawListing

MIN_RENT = 1800
MAX_RENT = 8000
MAX_LISTINGS_PER_CELL = 15


def realistic_rent(lat: float, lng: float, rng: random.Random) -> int:
    """
    Plausible Manhattan asking rent for a location, used only for the fallback
    batch shown when the real listing source is unavailable.
    """
    rent = 3000.0

    if lat < 40.7359:  # below 14th St
        rent += 2000
    elif lat < 40.7831:  # midtown
        rent += 2500
    elif lat < 40.7956:  # upper east/west
        rent += 1500
    else:
        rent += 500

    if lng < -73.99:  # Hudson side
        rent += 800
    elif lng > -73.96:  # park / east side
        rent += 600

    rent += (rng.random() - 0.5) * 1000
    return max(MIN_RENT, min(MAX_RENT, round_half_up(rent)))


def generate_sample_listings(*, seed: int, spec: GridSpec | None = None) -> list[RawListing]:
    """
    Deterministic synthetic batch: 1..15 listings at the center of every land
    cell, priced by realistic_rent, bedroom counts cycling 0..4. Same seed, same batch.
    """
    spec = spec or GridSpec()
    rng = random.Random(seed)
    out: list[RawListing] = []

    for cell in generate_grid_from_spec(spec):
        lat, lng = cell.center.lat, cell.center.lng
        for n in range(rng.randint(1, MAX_LISTINGS_PER_CELL)):
            out.append(
                RawListing(
                    price=float(realistic_rent(lat, lng, rng)),
                    address=f"Sample unit {n + 1}, cell {cell.row}-{cell.col}, {cell.neighborhood}",
                    latitude=lat,
                    longitude=lng,
                    bedrooms=n % 5,
                )
            )

    out.sort(key=lambda x: x.price or 0.0)
    return out


async def seed_sample_rentals(session: AsyncSession, *, seed: int) -> tuple[int, int]:
    """
    Upsert the synthetic batch into `rentals` under source="sample".
    Idempotent by address. Returns (created, updated); caller commits.
    """
    repo = RentalRepository(session)
    created = updated = 0
    for listing in generate_sample_listings(seed=seed):
        _, was_created = await repo.upsert_from_payload(
            {
                "address": listing.address,
                "price": listing.price,
                "bedrooms": listing.bedrooms,
                "latitude": listing.latitude,
                "longitude": listing.longitude,
                "source": "sample",
                "listing_source": "seed_demo",
            }
        )
        if was_created:
            created += 1
        else:
            updated += 1
    return created, updated
