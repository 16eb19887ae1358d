# scripts/init_db.py
import asyncio

from app.db import create_all
from app.logging_config import configure_logging


async def main() -> None:
    configure_logging()
    await create_all()
    print("OK: created all tables (idempotent).")


if __name__ == "__main__":
    asyncio.run(main())
