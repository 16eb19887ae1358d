# scripts/seed_demo.py
from __future__ import annotations

import argparse
import asyncio

from app.config import settings
from app.db import async_session_maker, create_all
from app.logging_config import configure_logging
from app.service_layer.sample_data import seed_sample_rentals


async def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--seed", type=int, default=settings.SAMPLE_SEED, help="Sample batch seed")
    args = parser.parse_args()

    configure_logging()
    await create_all()

    async with async_session_maker() as session:
        created, updated = await seed_sample_rentals(session, seed=args.seed)
        await session.commit()

    print(f"Seeded demo rentals. created={created} updated={updated} seed={args.seed}")


if __name__ == "__main__":
    asyncio.run(main())
