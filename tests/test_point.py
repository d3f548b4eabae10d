import dataclasses

import pytest

from maptransform.geo.point import Coordinate, LngLat, Point, clamp, interpolate, wrap


def test_point_arithmetic_returns_new_instances():
    p = Point(4, 6)

    half = p.div(2)

    assert half == Point(2, 3)
    assert p == Point(4, 6)
    assert p + Point(1, 1) == Point(5, 7)
    assert p - Point(1, 1) == Point(3, 5)
    assert p * 2 == Point(8, 12)
    assert Point(0, 0).dist(Point(3, 4)) == 5


def test_point_is_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        Point(1, 2).x = 3  # type: ignore[misc]


@pytest.mark.parametrize(
    "value",
    [LngLat(10, 20), (10, 20), [10, 20], {"lng": 10, "lat": 20}],
)
def test_lnglat_convert(value):
    assert LngLat.convert(value) == LngLat(10, 20)


@pytest.mark.parametrize("value", ["10,20", (1, 2, 3), {"x": 1, "y": 2}, None])
def test_lnglat_convert_rejects_other_values(value):
    with pytest.raises(ValueError):
        LngLat.convert(value)


def test_lnglat_wrap():
    assert LngLat(190, 5).wrap() == LngLat(-170, 5)
    assert LngLat(-180, 5).wrap() == LngLat(180, 5)
    assert LngLat(45, 5).wrap() == LngLat(45, 5)


def test_coordinate_zoom_to():
    coord = Coordinate(1.5, 2.0, 2)

    assert coord.zoom_to(4) == Coordinate(6.0, 8.0, 4)
    assert coord.zoom_to(1) == Coordinate(0.75, 1.0, 1)
    assert coord == Coordinate(1.5, 2.0, 2)


def test_helpers():
    assert wrap(270, -180, 180) == -90
    assert wrap(180, -180, 180) == 180
    assert clamp(5, 0, 3) == 3
    assert clamp(-1, 0, 3) == 0
    assert interpolate(2, 4, 0.5) == 3
