"""Web Mercator forward and inverse formulas.

These helpers are independent of any camera state: they convert between
degrees and absolute world pixels for a world ``world_size`` pixels wide.
No latitude clamping happens here; :class:`~maptransform.geo.transform.Transform`
keeps its centre inside the Mercator-safe range.
"""

from __future__ import annotations

import math

from .point import LngLat, Point


def lng_x(lng: float, world_size: float) -> float:
    """Return the absolute x pixel for longitude ``lng``."""

    return (180.0 + lng) * world_size / 360.0


def lat_y(lat: float, world_size: float) -> float:
    """Return the absolute y pixel for latitude ``lat``."""

    y = 180.0 / math.pi * math.log(math.tan(math.pi / 4.0 + lat * math.pi / 360.0))
    return (180.0 - y) * world_size / 360.0


def x_lng(x: float, world_size: float) -> float:
    return x * 360.0 / world_size - 180.0


def y_lat(y: float, world_size: float) -> float:
    y2 = 180.0 - y * 360.0 / world_size
    return 360.0 / math.pi * math.atan(math.exp(y2 * math.pi / 180.0)) - 90.0


def project(lnglat: LngLat, world_size: float) -> Point:
    """Convert ``lnglat`` to an absolute world pixel position."""

    return Point(lng_x(lnglat.lng, world_size), lat_y(lnglat.lat, world_size))


def unproject(point: Point, world_size: float) -> LngLat:
    """Convert an absolute world pixel position back to degrees."""

    return LngLat(x_lng(point.x, world_size), y_lat(point.y, world_size))


__all__ = ["lat_y", "lng_x", "project", "unproject", "x_lng", "y_lat"]
