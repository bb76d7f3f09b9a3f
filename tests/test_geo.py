import math

import pytest

from geoverify.core.geo import (
    GeoPoint,
    bearing,
    bounding_box,
    direction,
    distance,
    format_distance,
    haversine_m,
    is_within_radius,
    to_degrees,
    to_radians,
)


def test_distance_is_zero_for_identical_points():
    assert distance(25.0478, 121.5170, 25.0478, 121.5170) == 0
    assert distance(-33.8688, 151.2093, -33.8688, 151.2093) == 0


def test_distance_is_symmetric():
    a = distance(48.8566, 2.3522, 51.5074, -0.1278)
    b = distance(51.5074, -0.1278, 48.8566, 2.3522)
    assert a == pytest.approx(b)


def test_distance_quarter_of_the_equator():
    assert distance(0, 0, 0, 90) == pytest.approx(10_007_543, rel=0.005)


def test_distance_paris_london_is_roughly_344_km():
    assert distance(48.8566, 2.3522, 51.5074, -0.1278) == pytest.approx(343_500, rel=0.01)


def test_haversine_m_matches_distance():
    a = GeoPoint(lat=10.0, lon=20.0)
    b = GeoPoint(lat=10.5, lon=20.5)
    assert haversine_m(a, b) == distance(10.0, 20.0, 10.5, 20.5)


def test_radian_degree_conversions():
    assert to_radians(180) == pytest.approx(math.pi)
    assert to_degrees(math.pi / 2) == pytest.approx(90)
    assert to_degrees(to_radians(37.5)) == pytest.approx(37.5)


def test_bearing_cardinal_directions():
    assert bearing(0, 0, 1, 0) == pytest.approx(0)
    assert bearing(0, 0, 0, 1) == pytest.approx(90)
    assert bearing(0, 0, -1, 0) == pytest.approx(180)
    assert bearing(0, 0, 0, -1) == pytest.approx(270)


def test_bearing_is_never_negative():
    for lat2, lon2 in [(-1, -1), (1, -1), (0, -179), (-89, 0)]:
        b = bearing(0, 0, lat2, lon2)
        assert 0 <= b < 360


def test_direction_maps_to_compass_points():
    assert direction(0) == "N"
    assert direction(45) == "NE"
    assert direction(90) == "E"
    assert direction(180) == "S"
    assert direction(225) == "SW"
    assert direction(315) == "NW"


def test_direction_wraps_and_rounds_half_up():
    assert direction(360) == "N"
    assert direction(359) == "N"
    assert direction(337.5) == "N"
    assert direction(22.5) == "NE"
    assert direction(22.4) == "N"


def test_bounding_box_at_equator_is_one_degree_for_111320_m():
    box = bounding_box(0, 0, 111_320)
    assert box.min_lat == pytest.approx(-1)
    assert box.max_lat == pytest.approx(1)
    assert box.min_lon == pytest.approx(-1)
    assert box.max_lon == pytest.approx(1)


def test_bounding_box_widens_longitude_at_high_latitude():
    box = bounding_box(60, 10, 111_320)
    assert box.max_lat - box.min_lat == pytest.approx(2)
    assert box.max_lon - box.min_lon == pytest.approx(4)
    assert box.contains(60.5, 11.5)
    assert not box.contains(61.5, 10)


def test_is_within_radius_reports_rounded_distance():
    check = is_within_radius(0, 0, 0, 0.001, 200)
    assert check.is_within is True
    assert check.distance == 111
    assert check.radius_meters == 200

    check = is_within_radius(0, 0, 0, 0.001, 100)
    assert check.is_within is False


def test_format_distance():
    assert format_distance(0) == "0m"
    assert format_distance(999) == "999m"
    assert format_distance(999.4) == "999m"
    assert format_distance(1000) == "1.0km"
    assert format_distance(1250) == "1.3km"
    assert format_distance(2500) == "2.5km"
    assert format_distance(111_194.9) == "111.2km"


def test_primitives_propagate_nan_instead_of_raising():
    assert math.isnan(distance(math.nan, 0, 0, 0))
    assert math.isnan(distance(math.inf, 0, 0, 0))
    assert math.isnan(bearing(0, math.inf, 0, 0))
    assert direction(math.nan) is None
    assert math.isnan(bounding_box(math.inf, 0, 100).min_lat)

    check = is_within_radius(math.nan, 0, 0, 0, 10)
    assert check.is_within is False
    assert math.isnan(check.distance)


def test_format_distance_non_finite_and_huge_values():
    assert format_distance(math.inf) == "infkm"
    assert format_distance(math.nan) == "nankm"
    assert format_distance(1e30) == "1000000000000000019884624838.7km"
