import json

import httpx
import pytest

from app.adapters.clients.http_resilience import CircuitBreaker, reset_circuit
from app.adapters.clients.supabase_rentals import SupabaseRentalsClient
from app.adapters.ingestion.base import listing_from_payload, sort_by_price
from app.adapters.ingestion.sql_rentals import SqlRentalSource
from app.adapters.ingestion.stub_json import StubJsonSource
from app.adapters.ingestion.supabase import SupabaseRentalSource
from app.adapters.repos.rentals import RentalRepository
from app.config import settings
from app.domain.errors import UpstreamFetchFailure
from app.domain.types import RawListing


def test_listing_from_payload_validates_fields():
    got = listing_from_payload({"rent": "$3,200", "addressLine": " 10 W 20th St ", "lat": "40.74", "lng": -73.99})
    assert got == RawListing(price=3200.0, address="10 W 20th St", latitude=40.74, longitude=-73.99, bedrooms=None)

    half = listing_from_payload({"price": 2000, "address": "x", "latitude": 40.7})
    assert half.latitude is None and half.longitude is None

    bad = listing_from_payload({"price": "call us", "address": "x", "latitude": 140.0, "longitude": -73.9})
    assert bad.price is None
    assert not bad.has_coordinates


def test_sort_by_price_puts_unpriced_last():
    rows = [RawListing(None, "a", None, None), RawListing(5.0, "b", None, None), RawListing(2.0, "c", None, None)]
    assert [r.address for r in sort_by_price(rows)] == ["c", "b", "a"]


async def test_stub_json_source(tmp_path):
    path = tmp_path / "rentals.json"
    path.write_text(
        json.dumps(
            [
                {"price": 5000, "address": "b", "latitude": 40.73, "longitude": -74.0, "bedrooms": 1},
                {"price": 3000, "address": "a", "latitude": 40.73, "longitude": -74.0, "bedrooms": 0},
                "not a row",
            ]
        )
    )
    src = StubJsonSource(path=path)

    rows = await src.fetch_listings()
    assert [r.price for r in rows] == [3000.0, 5000.0]

    studios = await src.fetch_listings(bedrooms=0)
    assert [r.address for r in studios] == ["a"]


async def test_stub_json_missing_file_is_empty_and_bad_json_fails(tmp_path):
    assert await StubJsonSource(path=tmp_path / "nope.json").fetch_listings() == []

    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(UpstreamFetchFailure):
        await StubJsonSource(path=broken).fetch_listings()


async def test_rental_upsert_is_idempotent(async_session_maker):
    payload = {"address": "145 W 58th St", "price": "3,500", "bedrooms": 1, "lat": 40.7649, "lng": -73.9785}

    async with async_session_maker() as session:
        r1, created1 = await RentalRepository(session).upsert_from_payload(payload)
        await session.commit()

    async with async_session_maker() as session:
        r2, created2 = await RentalRepository(session).upsert_from_payload({**payload, "price": 3600})
        await session.commit()

    assert created1 is True and created2 is False
    assert r1.id == r2.id
    assert r2.price == 3600.0
    assert r2.price_display == "$3,600/mo"
    assert r2.bedrooms_display == "1 bed"


async def test_rental_upsert_requires_address(async_session_maker):
    async with async_session_maker() as session:
        with pytest.raises(ValueError):
            await RentalRepository(session).upsert_from_payload({"price": 3000})


async def test_sql_source_reads_rentals_by_price(async_session_maker):
    async with async_session_maker() as session:
        repo = RentalRepository(session)
        await repo.upsert_from_payload({"address": "b", "price": 5000, "bedrooms": 2, "latitude": 40.73, "longitude": -74.0})
        await repo.upsert_from_payload({"address": "a", "price": 3000, "bedrooms": 0})
        await session.commit()

    src = SqlRentalSource(session_factory=async_session_maker)
    rows = await src.fetch_listings()
    assert [r.address for r in rows] == ["a", "b"]
    assert rows[0].latitude is None
    assert rows[1].latitude == 40.73

    assert [r.address for r in await src.fetch_listings(bedrooms=2)] == ["b"]


def _client(handler) -> SupabaseRentalsClient:
    return SupabaseRentalsClient(
        base_url="https://example.supabase.co",
        api_key="anon-key",
        table="rentals",
        transport=httpx.MockTransport(handler),
    )


async def test_supabase_source_queries_postgrest():
    reset_circuit()
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["apikey"] = request.headers.get("apikey")
        return httpx.Response(200, json=[{"price": 3000, "address": "a", "latitude": 40.73, "longitude": -74.0}])

    rows = await SupabaseRentalSource(client=_client(handler)).fetch_listings(bedrooms=1)

    assert seen["path"] == "/rest/v1/rentals"
    assert seen["params"] == {"select": "*", "order": "price.asc", "bedrooms": "eq.1"}
    assert seen["apikey"] == "anon-key"
    assert rows[0].price == 3000.0


async def test_supabase_errors_become_upstream_failures():
    reset_circuit()

    def forbidden(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"message": "nope"})

    def not_a_list(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"value": []})

    with pytest.raises(UpstreamFetchFailure):
        await SupabaseRentalSource(client=_client(forbidden)).fetch_listings()
    with pytest.raises(UpstreamFetchFailure):
        await SupabaseRentalSource(client=_client(not_a_list)).fetch_listings()

    unconfigured = SupabaseRentalsClient(base_url="", api_key=None, table="rentals")
    unconfigured.base_url = ""
    with pytest.raises(UpstreamFetchFailure):
        await SupabaseRentalSource(client=unconfigured).fetch_listings()
    reset_circuit()


async def test_transient_errors_are_retried(monkeypatch):
    monkeypatch.setattr(settings, "HTTP_BACKOFF_BASE_S", 0.0)
    reset_circuit()
    calls = []

    def flaky(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) < 2:
            return httpx.Response(503)
        return httpx.Response(200, json=[])

    assert await SupabaseRentalSource(client=_client(flaky)).fetch_listings() == []
    assert len(calls) == 2
    reset_circuit()


def test_circuit_breaker_opens_then_half_opens():
    br = CircuitBreaker(threshold=2, reset_s=10)
    br.record_failure(0)
    assert br.allows(1)
    br.record_failure(1)
    assert not br.allows(2)

    assert br.allows(12)
    br.record_failure(12)
    assert not br.allows(13)

    br.record_success()
    assert br.allows(13)
