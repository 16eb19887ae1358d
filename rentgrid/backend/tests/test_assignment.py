import random

import pytest

from app.domain.assignment import (
    DROP_INVALID_PRICE,
    DROP_OUTSIDE_GRID,
    DROP_UNKNOWN_NEIGHBORHOOD,
    assign_listings,
)
from app.domain.grid import GridSpec, generate_grid_from_spec
from app.domain.types import RawListing


@pytest.fixture(scope="module")
def cells():
    return generate_grid_from_spec(GridSpec())


def test_two_listings_in_one_cell_average(cells, soho_pair):
    res = assign_listings(cells, soho_pair, cell_size=0.008)

    assert len(res.cells) == 1
    cell = res.cells[0]
    assert cell.key == (4, 2)
    assert cell.neighborhood == "SoHo"
    assert cell.aggregate.count == 2
    assert cell.aggregate.price == 4000
    assert cell.aggregate.price_display == "$4,000/mo"
    assert (res.total, res.assigned, res.dropped) == (2, 2, 0)


def test_invalid_prices_are_dropped(cells, soho_pair):
    junk = [
        RawListing(price=-5.0, address="x", latitude=40.73, longitude=-74.00),
        RawListing(price=None, address="y", latitude=40.73, longitude=-74.00),
        RawListing(price=0.0, address="z", latitude=40.73, longitude=-74.00),
    ]
    res = assign_listings(cells, soho_pair + junk, cell_size=0.008)
    assert res.cells[0].aggregate.price == 4000
    assert res.drop_reasons == {DROP_INVALID_PRICE: 3}


def test_averages_round_half_up(cells):
    listings = [
        RawListing(price=3000.0, address="a", latitude=40.73, longitude=-74.00),
        RawListing(price=3001.0, address="b", latitude=40.73, longitude=-74.00),
    ]
    res = assign_listings(cells, listings, cell_size=0.008)
    assert res.cells[0].aggregate.price == 3001


def test_coordinates_off_grid_are_dropped_by_default(cells):
    stray = RawListing(price=2500.0, address="145 W 58th St", latitude=40.65, longitude=-73.95)
    res = assign_listings(cells, [stray], cell_size=0.008)
    assert res.cells == []
    assert res.drop_reasons == {DROP_OUTSIDE_GRID: 1}


def test_address_fallback_for_off_grid_coordinates(cells):
    stray = RawListing(price=2500.0, address="145 W 58th St", latitude=40.65, longitude=-73.95)
    res = assign_listings(cells, [stray], cell_size=0.008, rng=random.Random(1), fallback_to_address=True)
    assert res.assigned == 1
    assert res.cells[0].neighborhood == "Midtown"


def test_listings_without_coordinates_use_the_address(cells):
    listings = [
        RawListing(price=3500.0, address="145 W 58th St", latitude=None, longitude=None),
        RawListing(price=2100.0, address="Apartment in Harlem", latitude=None, longitude=None),
    ]
    res = assign_listings(cells, listings, cell_size=0.008, rng=random.Random(7))
    assert res.assigned == 2
    assert sorted(c.neighborhood for c in res.cells) == ["Harlem", "Midtown"]


def test_seeded_rng_is_reproducible(cells):
    listings = [RawListing(price=float(2000 + i), address="Harlem", latitude=None, longitude=None) for i in range(30)]
    a = assign_listings(cells, listings, cell_size=0.008, rng=random.Random(3))
    b = assign_listings(cells, listings, cell_size=0.008, rng=random.Random(3))
    assert a == b


def test_unknown_neighborhood_is_counted(cells):
    def nowhere(_address):
        return "Atlantis"

    listing = RawListing(price=3000.0, address="?", latitude=None, longitude=None)
    res = assign_listings(cells, [listing], cell_size=0.008, address_estimator=nowhere)
    assert res.drop_reasons == {DROP_UNKNOWN_NEIGHBORHOOD: 1}


def test_conservation_and_input_cells_untouched(cells):
    rng = random.Random(11)
    listings = []
    for _ in range(400):
        on_map = rng.random() < 0.7
        listings.append(
            RawListing(
                price=rng.choice([None, -1.0, float(rng.randint(1500, 9000))]),
                address=rng.choice(["W 70th St", "", "Tribeca"]),
                latitude=rng.uniform(40.69, 40.89) if on_map else None,
                longitude=rng.uniform(-74.03, -73.90) if on_map else None,
            )
        )

    res = assign_listings(cells, listings, cell_size=0.008, rng=random.Random(5))

    assert res.total == 400
    assert res.assigned + res.dropped == res.total
    assert sum(c.aggregate.count for c in res.cells) == res.assigned
    assert all(c.aggregate.count >= 1 and c.aggregate.price > 0 for c in res.cells)
    assert all(c.aggregate.count == 0 for c in cells)

    kept = [c.key for c in res.cells]
    assert kept == sorted(kept)


def test_empty_inputs(cells):
    res = assign_listings(cells, [], cell_size=0.008)
    assert res.cells == [] and res.total == 0
    assert assign_listings([], [RawListing(3000.0, "x", 40.73, -74.0)], cell_size=0.008).dropped == 1
