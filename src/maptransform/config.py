"""Default configuration values for maptransform."""

from __future__ import annotations

from typing import Final

# Tiles are square; 512 px matches the vector tile sources the transform was
# designed around. Raster sources typically use 256 and pass their own size
# through ``CoveringOptions.tile_size``.
DEFAULT_TILE_SIZE: Final[int] = 512

# Camera altitude in viewport-height units. 1.5 yields a vertical field of
# view of ``2 * atan(1 / 3)``, roughly 36.87 degrees.
DEFAULT_ALTITUDE: Final[float] = 1.5

DEFAULT_MIN_ZOOM: Final[float] = 0.0
DEFAULT_MAX_ZOOM: Final[float] = 20.0

# Latitude where the square Web Mercator world ends.
MERCATOR_LAT_BOUND: Final[float] = 85.05113
DEFAULT_LAT_RANGE: Final[tuple[float, float]] = (-MERCATOR_LAT_BOUND, MERCATOR_LAT_BOUND)

# The far plane sits 1% beyond the furthest visible ground point so geometry
# exactly at the horizon is not clipped by rounding.
FAR_Z_MARGIN: Final[float] = 1.01

# Viewport corners closer than this (in tile units) to a tile boundary are
# snapped onto it before scan conversion.
COVER_EPSILON: Final[float] = 1e-9

# The packed tile id stores ``z`` in its low five bits.
MAX_TILE_ZOOM: Final[int] = 31

# ---------------------------------------------------------------------------
# Tile store
# ---------------------------------------------------------------------------

DEFAULT_CACHE_LIMIT: Final[int] = 256

# How many levels ``plan_render`` walks up the pyramid looking for a loaded
# ancestor to stand in for a tile that has not arrived yet.
MAX_PARENT_SEARCH_DEPTH: Final[int] = 4
