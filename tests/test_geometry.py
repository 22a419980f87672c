import math

import pytest

from routing.errors import InvalidCoordinate
from routing.geometry import (
    EARTH_RADIUS_KM,
    compute_route_bounding_box,
    contains_coordinate,
    distance_km,
    distance_to_segment_m,
    expand_bounding_box,
)
from routing.models import Coordinate, RouteBoundingBox, ensure_coordinate

ONE_DEGREE_KM = EARTH_RADIUS_KM * math.pi / 180


@pytest.fixture
def harare():
    return Coordinate(-17.824858, 31.053028)


@pytest.fixture
def bulawayo():
    return Coordinate(-20.1325, 28.626)


def test_distance_to_itself_is_zero(harare):
    assert distance_km(harare, harare) == 0.0


def test_distance_is_symmetric(harare, bulawayo):
    assert distance_km(harare, bulawayo) == pytest.approx(distance_km(bulawayo, harare), abs=1e-12)
    # roughly 365 km apart as the crow flies
    assert 350 < distance_km(harare, bulawayo) < 380


def test_one_degree_along_equator():
    assert distance_km(Coordinate(0, 0), Coordinate(0, 1)) == pytest.approx(ONE_DEGREE_KM, rel=1e-9)


def test_antipodal_points_do_not_overflow():
    # rounding can push the haversine term past 1; the result stays half the circumference
    assert distance_km(Coordinate(0, 0), Coordinate(0, 180)) == pytest.approx(math.pi * EARTH_RADIUS_KM, rel=1e-9)


def test_bounding_box_of_empty_route_is_none():
    assert compute_route_bounding_box([]) is None


def test_bounding_box_of_single_point_is_degenerate(harare):
    box = compute_route_bounding_box([harare])

    assert box == RouteBoundingBox(harare.latitude, harare.latitude, harare.longitude, harare.longitude)


def test_bounding_box_covers_every_point():
    route = [Coordinate(1, 5), Coordinate(-2, 3), Coordinate(4, -1)]

    box = compute_route_bounding_box(route)

    assert box == RouteBoundingBox(min_latitude=-2, max_latitude=4, min_longitude=-1, max_longitude=5)
    assert all(contains_coordinate(point, box) for point in route)


def test_expand_bounding_box_at_equator():
    box = RouteBoundingBox(0.0, 0.0, 0.0, 0.0)

    expanded = expand_bounding_box(box, 111320.0)

    # 111320 m is one degree in both directions at the equator
    assert expanded.min_latitude == pytest.approx(-1.0)
    assert expanded.max_latitude == pytest.approx(1.0)
    assert expanded.min_longitude == pytest.approx(-1.0)
    assert expanded.max_longitude == pytest.approx(1.0)


def test_expand_bounding_box_widens_longitude_with_latitude():
    box = RouteBoundingBox(60.0, 60.0, 10.0, 10.0)

    expanded = expand_bounding_box(box, 1000.0)

    lat_margin = expanded.max_latitude - box.max_latitude
    lon_margin = expanded.max_longitude - box.max_longitude
    # cos(60 deg) = 0.5, so a meter spans twice as many degrees of longitude
    assert lon_margin == pytest.approx(2 * lat_margin, rel=1e-6)


def test_expand_bounding_box_at_pole_is_clamped():
    box = RouteBoundingBox(89.99, 90.0, 0.0, 1.0)

    expanded = expand_bounding_box(box, 5000.0)

    assert expanded.max_latitude == 90.0
    assert expanded.min_longitude == -180.0
    assert expanded.max_longitude == 180.0


def test_expand_bounding_box_rejects_negative_margin():
    with pytest.raises(ValueError):
        expand_bounding_box(RouteBoundingBox(0, 1, 0, 1), -1.0)


def test_contains_coordinate_is_inclusive():
    box = RouteBoundingBox(0.0, 1.0, 0.0, 1.0)

    # 1. Corners and edges are inside
    assert contains_coordinate(Coordinate(0.0, 0.0), box)
    assert contains_coordinate(Coordinate(1.0, 1.0), box)
    assert contains_coordinate(Coordinate(0.5, 1.0), box)

    # 2. Anything past an edge is outside
    assert not contains_coordinate(Coordinate(1.0000001, 0.5), box)
    assert not contains_coordinate(Coordinate(0.5, -0.0000001), box)


def test_distance_to_segment_on_the_segment():
    start, end = Coordinate(0, 0), Coordinate(0, 1)

    assert distance_to_segment_m(Coordinate(0, 0.5), start, end) == pytest.approx(0.0, abs=1e-6)


def test_distance_to_segment_beside_the_segment():
    start, end = Coordinate(0, 0), Coordinate(0, 1)

    # 0.01 degrees north of the middle of an equatorial segment
    distance = distance_to_segment_m(Coordinate(0.01, 0.5), start, end)

    assert distance == pytest.approx(0.01 * ONE_DEGREE_KM * 1000, rel=1e-3)


def test_distance_to_segment_clamps_to_endpoints():
    start, end = Coordinate(0, 0), Coordinate(0, 1)

    # 1. Past the end: distance to the end point
    assert distance_to_segment_m(Coordinate(0, 2), start, end) == pytest.approx(ONE_DEGREE_KM * 1000, rel=1e-9)

    # 2. Behind the start: distance to the start point
    assert distance_to_segment_m(Coordinate(0, -0.5), start, end) == pytest.approx(ONE_DEGREE_KM * 500, rel=1e-9)


def test_distance_to_degenerate_segment_is_point_distance(harare, bulawayo):
    assert distance_to_segment_m(bulawayo, harare, harare) == pytest.approx(
        distance_km(bulawayo, harare) * 1000, rel=1e-9
    )


@pytest.mark.parametrize(
    "latitude, longitude",
    [(90.5, 0.0), (0.0, -180.1), (float("nan"), 0.0), (0.0, float("inf")), (True, 0.0), ("1", 2.0)],
)
def test_coordinate_rejects_invalid_values(latitude, longitude):
    with pytest.raises(InvalidCoordinate):
        Coordinate(latitude, longitude)


def test_ensure_coordinate_accepts_common_shapes():
    expected = Coordinate(-17.8, 31.05)

    assert ensure_coordinate(expected) is expected
    assert ensure_coordinate((-17.8, 31.05)) == expected
    assert ensure_coordinate([-17.8, 31.05]) == expected
    assert ensure_coordinate({"latitude": -17.8, "longitude": 31.05}) == expected
    assert ensure_coordinate({"lat": "-17.8", "lng": "31.05"}) == expected


@pytest.mark.parametrize("value", [None, "somewhere", (1.0,), {"lat": 1.0}, ("north", "east")])
def test_ensure_coordinate_rejects_unusable_values(value):
    with pytest.raises(InvalidCoordinate):
        ensure_coordinate(value)
