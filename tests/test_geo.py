import math

import pytest

from repeateratlas.geo import (
    InvalidLocatorError,
    MaidenheadLocator,
    Point,
    distance_km,
    latlon_to_grid,
)

TRONDHEIM = Point(63.4305, 10.3951)


def test_trondheim_grid():
    assert latlon_to_grid(TRONDHEIM.latitude, TRONDHEIM.longitude, 6) == "JP53ek"


def test_locator_center_matches_known_value():
    center = MaidenheadLocator("JP53fi").center()
    assert center.latitude == pytest.approx(63.354166666666686)
    assert center.longitude == pytest.approx(10.458333333333314)


def test_locator_case_is_normalized():
    assert MaidenheadLocator("jp53EK") == MaidenheadLocator("JP53ek")
    assert str(MaidenheadLocator("jp53EK")) == "JP53ek"


@pytest.mark.parametrize("bad", ["", "J", "ZZ", "JP5", "JP53yy", "JP53ek1", "12AB"])
def test_invalid_locators_raise(bad):
    with pytest.raises(InvalidLocatorError):
        MaidenheadLocator(bad)


def test_shorter_grid_is_prefix_of_longer():
    six = latlon_to_grid(TRONDHEIM.latitude, TRONDHEIM.longitude, 6)
    four = latlon_to_grid(TRONDHEIM.latitude, TRONDHEIM.longitude, 4)
    eight = latlon_to_grid(TRONDHEIM.latitude, TRONDHEIM.longitude, 8)
    assert six.startswith(four)
    assert eight.startswith(six)


@pytest.mark.parametrize(
    "lat, lon",
    [(0.0, 0.0), (-45.5, -120.25), (89.9, 179.9), (-89.9, -179.9), (63.4305, 10.3951)],
)
def test_center_round_trips_to_same_grid(lat, lon):
    grid = latlon_to_grid(lat, lon, 6)
    center = MaidenheadLocator(grid).center()
    assert latlon_to_grid(center.latitude, center.longitude, 6) == grid


def test_edges_encode_within_alphabet():
    grid = latlon_to_grid(90.0, 180.0, 6)
    assert MaidenheadLocator(grid).value == grid


@pytest.mark.parametrize("length", [0, 3, 5, 12])
def test_bad_length_raises(length):
    with pytest.raises(InvalidLocatorError):
        latlon_to_grid(10.0, 10.0, length)


@pytest.mark.parametrize("lat, lon", [(91.0, 0.0), (0.0, -181.0), (math.nan, 0.0)])
def test_out_of_range_raises(lat, lon):
    with pytest.raises(InvalidLocatorError):
        latlon_to_grid(lat, lon, 6)


def test_distance_same_point_is_zero():
    assert distance_km(TRONDHEIM, TRONDHEIM) == 0.0


def test_distance_is_symmetric():
    other = Point(59.9139, 10.7522)
    assert distance_km(TRONDHEIM, other) == pytest.approx(distance_km(other, TRONDHEIM))


def test_distance_antipodal_is_half_circumference():
    assert distance_km(Point(0.0, 0.0), Point(0.0, 180.0)) == pytest.approx(math.pi * 6371.0)