"""Custom exception hierarchy for maptransform."""

from __future__ import annotations


class MapTransformError(Exception):
    """Base class for all custom errors raised by maptransform."""


class DegenerateCameraError(MapTransformError):
    """Raised when the camera state cannot produce an invertible matrix stack.

    Typical causes are a viewport whose height or width is not known yet, a
    non-positive altitude, or a pitch steep enough to put the horizon inside
    the viewport.
    """


class TileCoordError(MapTransformError, ValueError):
    """Raised when a tile address cannot be represented by the packed id."""


# --- Configuration errors ---

class ConfigError(MapTransformError):
    """Base class for configuration problems."""


class ConfigLoadError(ConfigError):
    """Raised when a view configuration file cannot be read or parsed."""


class ConfigValidationError(ConfigError):
    """Raised when configuration values fail schema validation."""


__all__ = [
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "DegenerateCameraError",
    "MapTransformError",
    "TileCoordError",
]
