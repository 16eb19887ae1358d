import pytest

from app.domain.boundary import MANHATTAN_BOUNDARY, BoundaryRing, BoundingBox, point_in_polygon
from app.domain.errors import ConfigurationError
from app.domain.types import GeoPoint

UNIT_SQUARE = [GeoPoint(0, 0), GeoPoint(1, 0), GeoPoint(1, 1), GeoPoint(0, 1)]


def test_point_in_polygon_unit_square():
    assert point_in_polygon(GeoPoint(0.5, 0.5), UNIT_SQUARE) is True
    assert point_in_polygon(GeoPoint(1.5, 0.5), UNIT_SQUARE) is False
    assert point_in_polygon(GeoPoint(0.5, -0.1), UNIT_SQUARE) is False


def test_point_in_polygon_rejects_degenerate_ring():
    with pytest.raises(ConfigurationError):
        point_in_polygon(GeoPoint(0, 0), [GeoPoint(0, 0), GeoPoint(1, 1)])


def test_manhattan_landmarks():
    times_square = GeoPoint(lng=-73.9855, lat=40.7580)
    central_park = GeoPoint(lng=-73.9654, lat=40.7829)
    assert MANHATTAN_BOUNDARY.contains(times_square)
    assert MANHATTAN_BOUNDARY.contains(central_park)

    assert not MANHATTAN_BOUNDARY.contains(GeoPoint(lng=-73.95, lat=40.65))  # Brooklyn
    assert not MANHATTAN_BOUNDARY.contains(GeoPoint(lng=-74.05, lat=40.75))  # New Jersey


def test_swapped_coordinates_are_outside():
    # (lat, lng) passed where (lng, lat) is expected lands far off the island
    assert not MANHATTAN_BOUNDARY.contains(GeoPoint(40.7580, -73.9855))


def test_ring_is_closed_and_bbox_matches_vertices():
    ring = MANHATTAN_BOUNDARY.vertices
    assert ring[0] == ring[-1]

    bbox = MANHATTAN_BOUNDARY.bbox()
    assert bbox.min_lng == pytest.approx(-74.0189)
    assert bbox.max_lng == pytest.approx(-73.9105)
    assert bbox.min_lat == pytest.approx(40.7004)
    assert bbox.max_lat == pytest.approx(40.8755)


def test_ring_auto_closes_open_input():
    ring = BoundaryRing.from_lng_lat("tri", [(0, 0), (1, 0), (0, 1)])
    assert len(ring.vertices) == 4
    assert ring.vertices[-1] == GeoPoint(0.0, 0.0)


def test_ring_validation():
    with pytest.raises(ConfigurationError):
        BoundaryRing.from_lng_lat("line", [(0, 0), (1, 1), (0, 0)])
    with pytest.raises(ConfigurationError):
        BoundaryRing.from_lng_lat("nan", [(0, 0), (1, 0), (float("nan"), 1)])


def test_bounding_box_rejects_inverted_bounds():
    with pytest.raises(ConfigurationError):
        BoundingBox(min_lat=40.9, max_lat=40.7, min_lng=-74.0, max_lng=-73.9)

    box = BoundingBox(min_lat=40.7, max_lat=40.9, min_lng=-74.0, max_lng=-73.9)
    assert box.contains(GeoPoint(-73.95, 40.8))
    assert not box.contains(GeoPoint(40.8, -73.95))
