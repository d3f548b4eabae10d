"""Perspective camera transform and tile covering for Web Mercator maps.

The package answers two questions for a map camera: *where* a location
appears on screen (and the reverse), and *which* tiles are needed to fill the
viewport. Drawing and fetching tiles are left to the caller.
"""

from .errors import DegenerateCameraError, MapTransformError
from .geo import (
    Coordinate,
    CoveringOptions,
    LngLat,
    Point,
    TileCoord,
    Transform,
    TransformState,
)

__all__ = [
    "Coordinate",
    "CoveringOptions",
    "DegenerateCameraError",
    "LngLat",
    "MapTransformError",
    "Point",
    "TileCoord",
    "Transform",
    "TransformState",
]
