import math

from geoverify.core.validation import is_valid_coordinates


def test_valid_coordinates_including_bounds():
    assert is_valid_coordinates(0, 0)
    assert is_valid_coordinates(25.0478, 121.5170)
    assert is_valid_coordinates(90, 180)
    assert is_valid_coordinates(-90, -180)


def test_out_of_range_coordinates():
    assert not is_valid_coordinates(90.0001, 0)
    assert not is_valid_coordinates(-91, 0)
    assert not is_valid_coordinates(0, 180.5)
    assert not is_valid_coordinates(0, -181)


def test_non_numeric_and_non_finite_coordinates():
    assert not is_valid_coordinates("10", 10)
    assert not is_valid_coordinates(10, None)
    assert not is_valid_coordinates(True, 10)
    assert not is_valid_coordinates(math.nan, 10)
    assert not is_valid_coordinates(10, math.inf)
