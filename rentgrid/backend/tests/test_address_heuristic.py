import pytest

from app.domain.address import MANHATTAN_ADDRESS_HEURISTIC, estimate_neighborhood_from_address


@pytest.mark.parametrize(
    "address,label",
    [
        ("145 W 58th St, New York, NY", "Midtown"),
        ("200 East 86th Street", "Upper East Side"),
        ("310 W. 86th St", "Upper West Side"),
        ("55 West 125th St", "Harlem"),
        ("12 E 10th St", "SoHo"),
        ("1000 5th Ave", "Midtown East"),
    ],
)
def test_street_and_avenue_addresses(address, label):
    assert estimate_neighborhood_from_address(address) == label


def test_keywords_when_no_street_number():
    assert estimate_neighborhood_from_address("Sunny loft in Tribeca") == "Tribeca"
    assert estimate_neighborhood_from_address("East Harlem walk-up") == "Harlem"
    assert estimate_neighborhood_from_address("Upper West Side classic six") == "Upper West Side"


@pytest.mark.parametrize("address", [None, "", "   ", 12345, "somewhere nice"])
def test_unparseable_input_gets_default(address):
    assert estimate_neighborhood_from_address(address) == "Midtown"


def test_street_to_lat_is_linear_from_anchor():
    h = MANHATTAN_ADDRESS_HEURISTIC
    assert h.street_to_lat(14) == pytest.approx(40.7359)
    assert h.street_to_lat(58) == pytest.approx(40.7359 + 44 * 0.00063)
