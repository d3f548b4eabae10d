"""Perspective camera over a Web Mercator map.

:class:`Transform` owns the camera state (centre, zoom, bearing, pitch,
altitude and viewport size) and the matrix stack derived from it. The stack
is rebuilt synchronously by :meth:`Transform.update_state`, so every query
made after an update sees matrices that match the current state.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

import numpy as np

from .. import schema
from ..config import (
    DEFAULT_ALTITUDE,
    DEFAULT_LAT_RANGE,
    DEFAULT_MAX_ZOOM,
    DEFAULT_MIN_ZOOM,
    DEFAULT_TILE_SIZE,
    FAR_Z_MARGIN,
)
from ..errors import DegenerateCameraError
from . import matrix as mat4
from .mercator import lat_y, lng_x, x_lng, y_lat
from .point import Coordinate, LngLat, Point, clamp, interpolate, wrap
from .tile_coord import TileCoord, cover

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformState:
    """Camera configuration. Angles are in degrees."""

    tile_size: int = DEFAULT_TILE_SIZE
    center: LngLat = LngLat(0.0, 0.0)
    zoom: float = 0.0
    bearing: float = 0.0
    pitch: float = 0.0
    altitude: float = DEFAULT_ALTITUDE
    min_zoom: float = DEFAULT_MIN_ZOOM
    max_zoom: float = DEFAULT_MAX_ZOOM
    lng_range: tuple[float, float] | None = None
    lat_range: tuple[float, float] = DEFAULT_LAT_RANGE
    width: float = 0
    height: float = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> TransformState:
        """Build a validated state from a partial mapping (see :mod:`maptransform.schema`)."""

        raw = dict(data or {})
        if isinstance(raw.get("center"), LngLat):
            raw["center"] = list(raw["center"].to_tuple())
        merged = schema.merge_state_with_defaults(raw)
        merged["center"] = LngLat.convert(merged["center"])
        merged["lat_range"] = tuple(merged["lat_range"])
        if merged["lng_range"] is not None:
            merged["lng_range"] = tuple(merged["lng_range"])
        return cls(**merged)


@dataclass(frozen=True)
class CoveringOptions:
    """Parameters of a :meth:`Transform.covering_tiles` query.

    ``max_zoom`` of ``None`` disables the overscale clamp.
    """

    tile_size: int = DEFAULT_TILE_SIZE
    min_zoom: int = 0
    max_zoom: int | None = None
    round_zoom: bool = False
    reparse_overscaled: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> CoveringOptions:
        return cls(**schema.merge_options_with_defaults(dict(data or {})))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class Transform:
    """Camera transform between geographic, tile and screen coordinates."""

    def __init__(self, state: TransformState | None = None, **changes: Any) -> None:
        self._state = state or TransformState()
        self._proj_matrix: np.ndarray | None = None
        self._pixel_matrix: np.ndarray | None = None
        self._pixel_matrix_inverse: np.ndarray | None = None
        self.update_state(**changes)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def state(self) -> TransformState:
        return self._state

    def update_state(self, **changes: Any) -> None:
        """Merge ``changes`` into the state and rebuild the matrix stack.

        Fields that are not named keep their value. Zoom is clamped to the
        state's zoom range, bearing wrapped to ``(-180, 180]`` and the centre
        constrained to ``lat_range`` (and ``lng_range`` when set). When the
        viewport height is still unknown the matrices are left unset; see
        :meth:`recalculate`.

        Raises :class:`~maptransform.errors.DegenerateCameraError` when the
        new state cannot be projected. The state is kept in that case so the
        caller can correct it with another update.
        """

        if "center" in changes:
            changes["center"] = LngLat.convert(changes["center"])
        for key in ("lng_range", "lat_range"):
            if changes.get(key) is not None:
                changes[key] = tuple(changes[key])

        self._state = self._constrain(replace(self._state, **changes))
        self._calc_matrices()

    # ------------------------------------------------------------------
    def recalculate(self) -> None:
        """Rebuild the matrix stack, failing if the viewport size is unknown."""

        if not self.height:
            raise DegenerateCameraError("Viewport height is not set")
        self._calc_matrices()

    # ------------------------------------------------------------------
    @staticmethod
    def _constrain(state: TransformState) -> TransformState:
        zoom = clamp(state.zoom, state.min_zoom, state.max_zoom)
        bearing = wrap(state.bearing, -180.0, 180.0)
        lng, lat = state.center.lng, state.center.lat
        if state.lat_range is not None:
            lat = clamp(lat, state.lat_range[0], state.lat_range[1])
        if state.lng_range is not None:
            lng = clamp(lng, state.lng_range[0], state.lng_range[1])
        return replace(state, zoom=zoom, bearing=bearing, center=LngLat(lng, lat))

    # ------------------------------------------------------------------
    # Derived quantities
    # ------------------------------------------------------------------
    @property
    def tile_size(self) -> int:
        return self._state.tile_size

    @property
    def min_zoom(self) -> float:
        return self._state.min_zoom

    @property
    def max_zoom(self) -> float:
        return self._state.max_zoom

    @property
    def zoom(self) -> float:
        return self._state.zoom

    @property
    def tile_zoom(self) -> int:
        return math.floor(self.zoom)

    @property
    def scale(self) -> float:
        return 2.0 ** self.zoom

    @property
    def world_size(self) -> float:
        return self.tile_size * self.scale

    @property
    def width(self) -> float:
        return self._state.width

    @property
    def height(self) -> float:
        return self._state.height

    @property
    def size(self) -> Point:
        return Point(self.width, self.height)

    @property
    def center_point(self) -> Point:
        return self.size.div(2)

    @property
    def center(self) -> LngLat:
        return self._state.center

    @property
    def bearing_rad(self) -> float:
        # Positive bearings turn the map clockwise on screen.
        return -self._state.bearing * math.pi / 180.0

    @property
    def pitch_rad(self) -> float:
        return self._state.pitch * math.pi / 180.0

    @property
    def altitude(self) -> float:
        return self._state.altitude

    @property
    def x(self) -> float:
        return lng_x(self.center.lng, self.world_size)

    @property
    def y(self) -> float:
        return lat_y(self.center.lat, self.world_size)

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)

    @staticmethod
    def zoom_scale(zoom: float) -> float:
        return 2.0 ** zoom

    @staticmethod
    def scale_zoom(scale: float) -> float:
        return math.log2(scale)

    # ------------------------------------------------------------------
    # Matrices
    # ------------------------------------------------------------------
    @property
    def proj_matrix(self) -> np.ndarray:
        """World pixels to clip space."""

        return self._require(self._proj_matrix)

    @property
    def pixel_matrix(self) -> np.ndarray:
        """World pixels to screen pixels (before the perspective divide)."""

        return self._require(self._pixel_matrix)

    @property
    def pixel_matrix_inverse(self) -> np.ndarray:
        return self._require(self._pixel_matrix_inverse)

    def _require(self, m: np.ndarray | None) -> np.ndarray:
        if m is None:
            raise DegenerateCameraError(
                "Camera matrices are unavailable; set a non-zero viewport height first"
            )
        return m

    # ------------------------------------------------------------------
    def _calc_matrices(self) -> None:
        self._proj_matrix = None
        self._pixel_matrix = None
        self._pixel_matrix_inverse = None

        if not self.height:
            _LOGGER.debug("Viewport height unknown; skipping matrix calculation")
            return
        if not self.width:
            self._degenerate("Viewport width is not set")
        if not self.altitude > 0:
            self._degenerate(f"Camera altitude must be positive, got {self.altitude}")

        pitch = self.pitch_rad

        # Distance from the centre to the top edge of the ground plane in
        # altitude units, by the law of sines.
        half_fov = math.atan(0.5 / self.altitude)
        ground_angle = math.pi / 2.0 + pitch
        camera_to_center_distance = 0.5 / math.tan(half_fov) * self.height
        horizon_sin = math.sin(math.pi - ground_angle - half_fov)
        if horizon_sin <= 0.0:
            self._degenerate(
                f"Pitch {self._state.pitch} with altitude {self.altitude} puts the horizon in view"
            )
        top_half_surface_distance = math.sin(half_fov) * camera_to_center_distance / horizon_sin

        # z distance of the farthest fragment that should be rendered.
        furthest_distance = (
            math.cos(math.pi / 2.0 - pitch) * top_half_surface_distance + camera_to_center_distance
        )
        far_z = furthest_distance * FAR_Z_MARGIN

        # location -> GL clip coordinates (-1 .. 1)
        m = mat4.perspective(2.0 * half_fov, self.width / self.height, 1.0, far_z)
        m = mat4.scale(m, (1.0, -1.0, 1.0))
        m = mat4.translate(m, (0.0, 0.0, -camera_to_center_distance))
        m = mat4.rotate_x(m, pitch)
        m = mat4.rotate_z(m, self.bearing_rad)
        m = mat4.translate(m, (-self.x, -self.y, 0.0))
        proj_matrix = m

        # location -> screen pixels
        m = mat4.scale(mat4.identity(), (self.width / 2.0, -self.height / 2.0, 1.0))
        m = mat4.translate(m, (1.0, -1.0, 0.0))
        pixel_matrix = m @ proj_matrix

        pixel_matrix_inverse = mat4.invert(pixel_matrix)
        if pixel_matrix_inverse is None:
            self._degenerate("Pixel matrix is singular")

        for m in (proj_matrix, pixel_matrix, pixel_matrix_inverse):
            m.setflags(write=False)
        self._proj_matrix = proj_matrix
        self._pixel_matrix = pixel_matrix
        self._pixel_matrix_inverse = pixel_matrix_inverse
        _LOGGER.debug(
            "Recomputed camera matrices: zoom=%s bearing=%s pitch=%s size=%sx%s",
            self.zoom,
            self._state.bearing,
            self._state.pitch,
            self.width,
            self.height,
        )

    def _degenerate(self, message: str) -> None:
        _LOGGER.warning("Degenerate camera: %s", message)
        raise DegenerateCameraError(message)

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------
    def location_point(self, lnglat: LngLat) -> Point:
        """Return the screen point showing ``lnglat``."""

        return self.coordinate_point(self.location_coordinate(lnglat))

    def point_location(self, point: Point) -> LngLat:
        """Return the location on the ground under screen ``point``."""

        return self.coordinate_location(self.point_coordinate(point))

    # ------------------------------------------------------------------
    def location_coordinate(self, lnglat: LngLat) -> Coordinate:
        """Return the unrounded tile coordinate of ``lnglat`` at ``tile_zoom``."""

        ll = LngLat.convert(lnglat)
        world_size = self.world_size
        k = self.zoom_scale(self.tile_zoom) / world_size
        return Coordinate(
            lng_x(ll.lng, world_size) * k,
            lat_y(ll.lat, world_size) * k,
            self.tile_zoom,
        )

    def coordinate_location(self, coord: Coordinate) -> LngLat:
        world_size = self.zoom_scale(coord.zoom)
        return LngLat(x_lng(coord.column, world_size), y_lat(coord.row, world_size))

    # ------------------------------------------------------------------
    def point_coordinate(self, point: Point) -> Coordinate:
        """Return the tile coordinate on the ground plane under screen ``point``.

        A screen point is a ray through the scene, so two points on it are
        unprojected (at clip depths 0 and 1) and the ray is intersected with
        the ground plane ``z = 0``.
        """

        inverse = self.pixel_matrix_inverse
        coord0 = mat4.transform_vec4(inverse, (point.x, point.y, 0.0, 1.0))
        coord1 = mat4.transform_vec4(inverse, (point.x, point.y, 1.0, 1.0))

        w0 = coord0[3]
        w1 = coord1[3]
        x0 = coord0[0] / w0
        x1 = coord1[0] / w1
        y0 = coord0[1] / w0
        y1 = coord1[1] / w1
        z0 = coord0[2] / w0
        z1 = coord1[2] / w1

        t = 0.0 if z0 == z1 else (0.0 - z0) / (z1 - z0)
        scale = self.world_size / self.zoom_scale(self.tile_zoom)
        return Coordinate(
            float(interpolate(x0, x1, t)) / scale,
            float(interpolate(y0, y1, t)) / scale,
            self.tile_zoom,
        )

    def coordinate_point(self, coord: Coordinate) -> Point:
        """Return the screen point showing tile coordinate ``coord``."""

        scale = self.world_size / self.zoom_scale(coord.zoom)
        p = mat4.transform_vec4(self.pixel_matrix, (coord.column * scale, coord.row * scale, 0.0, 1.0))
        return Point(float(p[0] / p[3]), float(p[1] / p[3]))

    # ------------------------------------------------------------------
    def calculate_pos_matrix(
        self, coord: TileCoord | Coordinate, max_zoom: float | None = None
    ) -> np.ndarray:
        """Return the matrix that places a tile's world pixels in clip space.

        ``max_zoom`` is the source's maximum zoom; an overscaled tile is
        positioned like the ``max_zoom`` tile whose data it displays.
        """

        if max_zoom is None:
            max_zoom = math.inf
        if isinstance(coord, TileCoord):
            coord = coord.to_coordinate(max_zoom)

        z = min(coord.zoom, max_zoom)
        scale = self.world_size / 2.0 ** z
        pos_matrix = mat4.translate(mat4.identity(), (coord.column * scale, coord.row * scale, 0.0))
        return self.proj_matrix @ pos_matrix

    # ------------------------------------------------------------------
    # Covering
    # ------------------------------------------------------------------
    def covering_zoom_level(self, options: CoveringOptions) -> int:
        """Return the tile zoom whose tiles best match the current zoom.

        ``round_zoom`` picks the nearer level (sharper, more tiles); otherwise
        the level below is used.
        """

        rounding = _round_half_up if options.round_zoom else math.floor
        return rounding(self.zoom + self.scale_zoom(self.tile_size / options.tile_size))

    def covering_tiles(self, options: CoveringOptions) -> list[TileCoord]:
        """Return the tiles needed to fill the viewport, nearest to the centre first.

        Nothing is returned below ``options.min_zoom`` or below zoom 0. Above
        ``options.max_zoom`` the cover is computed at ``max_zoom``; with
        ``reparse_overscaled`` the tiles keep the true zoom so the renderer can
        tell they are overscaled.
        """

        z = self.covering_zoom_level(options)
        actual_z = z

        if z < max(options.min_zoom, 0):
            return []
        if options.max_zoom is not None and z > options.max_zoom:
            _LOGGER.debug("Covering zoom %d clamped to source max zoom %d", z, options.max_zoom)
            z = options.max_zoom

        corners = [
            self.point_coordinate(Point(0, 0)).zoom_to(z),
            self.point_coordinate(Point(self.width, 0)).zoom_to(z),
            self.point_coordinate(Point(self.width, self.height)).zoom_to(z),
            self.point_coordinate(Point(0, self.height)).zoom_to(z),
        ]
        tiles = cover(z, corners, actual_z if options.reparse_overscaled else z)

        tile_center = self.location_coordinate(self.center).zoom_to(z)
        center = Point(tile_center.column - 0.5, tile_center.row - 0.5)
        dim = 1 << z

        def distance(tile: TileCoord) -> tuple[float, int]:
            return (Point(tile.x + dim * tile.w, tile.y).dist(center), tile.id)

        return sorted(tiles, key=distance)


__all__ = ["CoveringOptions", "Transform", "TransformState"]
