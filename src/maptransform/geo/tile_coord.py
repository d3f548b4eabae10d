"""Packed tile addresses and the viewport covering algorithm."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import NamedTuple

from ..config import COVER_EPSILON, MAX_TILE_ZOOM
from ..errors import TileCoordError
from .point import Coordinate

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TileCoord:
    """Integer tile address ``z/x/y`` in world copy ``w``.

    ``w`` counts repetitions of the world across the antimeridian: ``0`` is
    the canonical world, positive values lie to the east. ``id`` packs all
    four components into one integer that is stable across processes and
    serves as the dictionary key throughout the covering and caching code.
    """

    z: int
    x: int
    y: int
    w: int = 0
    id: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not 0 <= self.z <= MAX_TILE_ZOOM:
            raise TileCoordError(f"Tile zoom {self.z} outside [0, {MAX_TILE_ZOOM}]")

        w2 = self.w * 2
        if w2 < 0:
            w2 = -w2 - 1
        dim = 1 << self.z
        object.__setattr__(self, "id", ((dim * dim * w2 + dim * self.y + self.x) * 32) + self.z)

    def __str__(self) -> str:
        return f"{self.z}/{self.x}/{self.y}"

    @property
    def key(self) -> tuple[int, int, int]:
        return (self.z, self.x, self.y)

    # ------------------------------------------------------------------
    @classmethod
    def from_id(cls, tile_id: int) -> TileCoord:
        """Rebuild the tile packed into ``tile_id``."""

        z = tile_id % 32
        dim = 1 << z
        xy = (tile_id - z) // 32
        x = xy % dim
        y = ((xy - x) // dim) % dim
        w2 = xy // (dim * dim)
        if w2 % 2 != 0:
            w2 = -w2 - 1
        return cls(z, x, y, w2 // 2)

    # ------------------------------------------------------------------
    def to_coordinate(self, source_max_zoom: float = math.inf) -> Coordinate:
        """Return the fractional position of the tile's top-left corner.

        Overscaled tiles are expressed at ``source_max_zoom`` so that they are
        positioned like the source tile whose data they display.
        """

        zoom = min(self.z, source_max_zoom)
        tile_scale = 2 ** zoom
        return Coordinate(self.x + tile_scale * self.w, self.y, zoom)

    # ------------------------------------------------------------------
    def parent(self, source_max_zoom: float) -> TileCoord | None:
        """Return the parent tile, or ``None`` at the root."""

        if self.z == 0:
            return None

        # An overscaled tile shares its source data with its parent.
        if self.z > source_max_zoom:
            return TileCoord(self.z - 1, self.x, self.y, self.w)

        return TileCoord(self.z - 1, self.x // 2, self.y // 2, self.w)

    # ------------------------------------------------------------------
    def children(self, source_max_zoom: float) -> list[TileCoord]:
        """Return the tiles one level below this one."""

        if self.z >= source_max_zoom:
            # Past the source's detail there is a single overscaled child.
            return [TileCoord(self.z + 1, self.x, self.y, self.w)]

        z = self.z + 1
        x = self.x * 2
        y = self.y * 2
        return [
            TileCoord(z, x, y, self.w),
            TileCoord(z, x + 1, y, self.w),
            TileCoord(z, x, y + 1, self.w),
            TileCoord(z, x + 1, y + 1, self.w),
        ]

    # ------------------------------------------------------------------
    def wrapped(self) -> TileCoord:
        """Return the same tile in the canonical world copy."""

        return TileCoord(self.z, self.x, self.y, 0)


# ----------------------------------------------------------------------
# Scan conversion (after polymaps' Layer.js)
# ----------------------------------------------------------------------

class _Edge(NamedTuple):
    x0: float
    y0: float
    x1: float
    y1: float
    dx: float
    dy: float


ScanLine = Callable[[int, int, int], None]


def _edge(a: Coordinate, b: Coordinate) -> _Edge:
    if a.row > b.row:
        a, b = b, a
    return _Edge(a.column, a.row, b.column, b.row, b.column - a.column, b.row - a.row)


def _scan_spans(e0: _Edge, e1: _Edge, ymin: int, ymax: int, scan_line: ScanLine) -> None:
    y0 = max(ymin, math.floor(e1.y0))
    y1 = min(ymax, math.ceil(e1.y1))

    # Order the edges so ``e0`` bounds the span on the right.
    if e0.x0 == e1.x0 and e0.y0 == e1.y0:
        swap = e0.x0 + e1.dy / e0.dy * e0.dx < e1.x1
    else:
        swap = e0.x1 - e1.dy / e0.dy * e0.dx < e1.x0
    if swap:
        e0, e1 = e1, e0

    m0 = e0.dx / e0.dy
    m1 = e1.dx / e1.dy
    d0 = 1 if e0.dx > 0 else 0  # use y + 1 to compute x0
    d1 = 1 if e1.dx < 0 else 0  # use y + 1 to compute x1
    for y in range(y0, y1):
        x0 = m0 * max(0.0, min(e0.dy, y + d0 - e0.y0)) + e0.x0
        x1 = m1 * max(0.0, min(e1.dy, y + d1 - e1.y0)) + e1.x0
        scan_line(math.floor(x1), math.ceil(x0), y)


def _scan_triangle(
    a: Coordinate, b: Coordinate, c: Coordinate, ymin: int, ymax: int, scan_line: ScanLine
) -> None:
    ab = _edge(a, b)
    bc = _edge(b, c)
    ca = _edge(c, a)

    # Sort edges by vertical extent; ``ca`` ends up spanning the full height.
    if ab.dy > bc.dy:
        ab, bc = bc, ab
    if ab.dy > ca.dy:
        ab, ca = ca, ab
    if bc.dy > ca.dy:
        bc, ca = ca, bc

    if ab.dy:
        _scan_spans(ca, ab, ymin, ymax, scan_line)
    if bc.dy:
        _scan_spans(ca, bc, ymin, ymax, scan_line)


def _snap(value: float) -> float:
    nearest = round(value)
    return float(nearest) if abs(value - nearest) < COVER_EPSILON else value


def cover(z: int, bounds: Sequence[Coordinate], actual_z: int) -> list[TileCoord]:
    """Return every tile overlapping the quadrilateral ``bounds`` at zoom ``z``.

    ``bounds`` holds four corners in tile units at ``z``, in drawing order.
    The resulting tiles are addressed at ``actual_z``, which differs from
    ``z`` for overscaled covers. Columns wrap around the antimeridian into
    world copies; rows outside the world are dropped.
    """

    tiles = 1 << z
    found: dict[int, TileCoord] = {}

    def scan_line(x0: int, x1: int, y: int) -> None:
        if 0 <= y <= tiles:
            for x in range(x0, x1):
                coord = TileCoord(actual_z, x % tiles, y, x // tiles)
                found[coord.id] = coord

    corners = [Coordinate(_snap(c.column), _snap(c.row), c.zoom) for c in bounds]

    # Split the quadrilateral into two triangles sharing the 0-2 diagonal:
    # +---/
    # | / |
    # /---+
    _scan_triangle(corners[0], corners[1], corners[2], 0, tiles, scan_line)
    _scan_triangle(corners[2], corners[3], corners[0], 0, tiles, scan_line)

    _LOGGER.debug("Covered %d tiles at z=%d (output z=%d)", len(found), z, actual_z)
    return list(found.values())


__all__ = ["TileCoord", "cover"]
