import pytest

from maptransform.geo.mercator import lat_y, lng_x, project, unproject, x_lng, y_lat
from maptransform.geo.point import LngLat, Point


def test_lng_x_spans_the_world():
    assert lng_x(-180, 512) == 0
    assert lng_x(0, 512) == 256
    assert lng_x(180, 512) == 512


def test_lat_y_equator_and_mercator_bound():
    assert lat_y(0, 512) == pytest.approx(256)
    assert lat_y(85.0511287798066, 512) == pytest.approx(0, abs=1e-6)
    assert lat_y(-85.0511287798066, 512) == pytest.approx(512, abs=1e-6)


def test_lat_y_grows_southwards():
    assert lat_y(10, 512) < lat_y(0, 512) < lat_y(-10, 512)


def test_inverse_formulas():
    assert x_lng(256, 512) == 0
    assert y_lat(256, 512) == pytest.approx(0, abs=1e-12)


@pytest.mark.parametrize("world_size", [1.0, 512.0, 512.0 * 2**20])
@pytest.mark.parametrize("lng, lat", [(0.0, 0.0), (-179.5, 84.9), (123.456, -33.3), (45.0, -84.99)])
def test_project_unproject_round_trip(lng, lat, world_size):
    result = unproject(project(LngLat(lng, lat), world_size), world_size)

    assert result.lng == pytest.approx(lng, abs=1e-9)
    assert result.lat == pytest.approx(lat, abs=1e-9)


def test_unproject_does_not_clamp():
    result = unproject(Point(-512, 256), 512)

    assert result.lng == pytest.approx(-540)
