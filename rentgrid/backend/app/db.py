# app/db.py
from __future__ import annotations

from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from .config import settings

engine: AsyncEngine = create_async_engine(settings.RENTGRID_DB_URL, echo=False, future=True)

AsyncSessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

# SqlRentalSource, scheduler and scripts take a session factory under this name
async_session_maker = AsyncSessionLocal


async def create_all(bind: AsyncEngine | None = None) -> None:
    """Create missing tables (idempotent). Rentals are written by the scraper, never by the app."""
    from .models import Base

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ping(session: AsyncSession) -> bool:
    await session.execute(text("SELECT 1"))
    return True


async def get_session() -> AsyncSession:
    """
    FastAPI dependency that yields a session.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def async_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session
