"""Value types shared by the projection and covering code."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass


def wrap(n: float, minimum: float, maximum: float) -> float:
    """Constrain ``n`` to ``(minimum, maximum]`` via modular arithmetic."""

    d = maximum - minimum
    w = ((n - minimum) % d + d) % d + minimum
    return maximum if w == minimum else w


def clamp(n: float, minimum: float, maximum: float) -> float:
    """Constrain ``n`` to ``[minimum, maximum]``."""

    return min(maximum, max(minimum, n))


def interpolate(a: float, b: float, t: float) -> float:
    return (a * (1 - t)) + (b * t)


@dataclass(frozen=True)
class Point:
    """Immutable 2D vector.

    Arithmetic always returns a new instance, so a ``Point`` can be shared
    freely between the transform and its callers.
    """

    x: float
    y: float

    def add(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def sub(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def mult(self, k: float) -> Point:
        return Point(self.x * k, self.y * k)

    def div(self, k: float) -> Point:
        return Point(self.x / k, self.y / k)

    def dist(self, other: Point) -> float:
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    __add__ = add
    __sub__ = sub
    __mul__ = mult
    __truediv__ = div


@dataclass(frozen=True)
class LngLat:
    """Geographic position in degrees."""

    lng: float
    lat: float

    @classmethod
    def convert(cls, value: LngLat | Sequence[float] | Mapping[str, float]) -> LngLat:
        """Coerce ``(lng, lat)`` pairs and ``{"lng", "lat"}`` mappings."""

        if isinstance(value, LngLat):
            return value
        if isinstance(value, Mapping):
            if "lng" in value and "lat" in value:
                return cls(float(value["lng"]), float(value["lat"]))
        elif isinstance(value, Sequence) and not isinstance(value, str) and len(value) == 2:
            return cls(float(value[0]), float(value[1]))
        raise ValueError(
            "LngLat must be a LngLat, a (lng, lat) pair or a mapping with 'lng' and 'lat' keys"
        )

    def wrap(self) -> LngLat:
        """Return a copy with the longitude wrapped into ``(-180, 180]``."""

        return LngLat(wrap(self.lng, -180.0, 180.0), self.lat)

    def to_tuple(self) -> tuple[float, float]:
        return (self.lng, self.lat)


@dataclass(frozen=True)
class Coordinate:
    """Fractional tile-space position.

    At zoom ``z`` the world spans ``[0, 2**z)`` in both ``column`` and ``row``.
    """

    column: float
    row: float
    zoom: float

    def zoom_to(self, zoom: float) -> Coordinate:
        """Return the same position expressed at ``zoom``."""

        scale = 2.0 ** (zoom - self.zoom)
        return Coordinate(self.column * scale, self.row * scale, zoom)


__all__ = ["Coordinate", "LngLat", "Point", "clamp", "interpolate", "wrap"]
