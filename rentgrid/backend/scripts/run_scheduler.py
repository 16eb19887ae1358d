# scripts/run_scheduler.py
from __future__ import annotations

import argparse
import asyncio
import logging

from app.jobs.scheduler import build_scheduler, refresh_once
from app.logging_config import configure_logging

log = logging.getLogger(__name__)


async def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--once", action="store_true", help="Run one refresh and exit")
    args = parser.parse_args()

    configure_logging()

    if args.once:
        await refresh_once()
        return

    scheduler = build_scheduler()
    scheduler.start()
    log.info("Scheduler started")

    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        scheduler.shutdown()
        log.info("Scheduler stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
