"""Projection math, camera transform and tile covering."""

from .mercator import lat_y, lng_x, project, unproject, x_lng, y_lat
from .point import Coordinate, LngLat, Point
from .tile_coord import TileCoord, cover
from .transform import CoveringOptions, Transform, TransformState

__all__ = [
    "Coordinate",
    "CoveringOptions",
    "LngLat",
    "Point",
    "TileCoord",
    "Transform",
    "TransformState",
    "cover",
    "lat_y",
    "lng_x",
    "project",
    "unproject",
    "x_lng",
    "y_lat",
]
