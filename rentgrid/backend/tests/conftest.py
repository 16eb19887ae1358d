# tests/conftest.py
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.domain.errors import UpstreamFetchFailure
from app.domain.types import RawListing
from app.models import Base


class FakeSource:
    """In-memory ListingSource. `exc` makes every fetch raise it."""

    def __init__(self, listings=None, exc: Exception | None = None, name: str = "fake"):
        self.listings = list(listings or [])
        self.exc = exc
        self.name = name
        self.calls = 0

    async def fetch_listings(self, *, bedrooms=None):
        self.calls += 1
        if self.exc is not None:
            raise self.exc
        if bedrooms is None:
            return list(self.listings)
        return [l for l in self.listings if l.bedrooms == bedrooms]


@pytest.fixture
def make_source():
    return FakeSource


@pytest.fixture
def soho_pair():
    # both land in cell (4, 2), centered at (40.731, -74.000)
    return [
        RawListing(price=3000.0, address="1 Spring St", latitude=40.73, longitude=-74.00, bedrooms=1),
        RawListing(price=5000.0, address="2 Spring St", latitude=40.73, longitude=-74.00, bedrooms=2),
    ]


@pytest.fixture
def fake_source(soho_pair):
    return FakeSource(soho_pair)


@pytest.fixture
def failing_source():
    return FakeSource(exc=UpstreamFetchFailure("fake", "connection refused"))


@pytest.fixture
async def engine():
    """
    Fresh in-memory DB per test. StaticPool makes all connections share the same
    in-memory database for the lifetime of this engine fixture.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def async_session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=True)
