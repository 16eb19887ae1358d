# scripts/smoke_heatmap.py
import argparse
import asyncio

from app.config import settings
from app.logging_config import configure_logging
from app.service_layer.use_cases.heatmap import build_heatmap, build_listing_source, summarize


async def main():
    parser = argparse.ArgumentParser()
    default_beds = "all" if settings.DEFAULT_BEDROOMS is None else str(settings.DEFAULT_BEDROOMS)
    parser.add_argument("--bedrooms", default=default_beds, help="0..10 or 'all'")
    parser.add_argument("--regime", default=settings.SCALE_REGIME)
    args = parser.parse_args()

    configure_logging()
    bedrooms = None if args.bedrooms.strip().lower() == "all" else int(args.bedrooms)

    coll = await build_heatmap(build_listing_source(), bedrooms=bedrooms, regime=args.regime)
    print(summarize(coll))
    for item in coll.legend:
        print(f"  {item.color}  {item.label}  ({item.tier})")


if __name__ == "__main__":
    asyncio.run(main())
