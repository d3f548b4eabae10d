"""JSON Schemas for camera state and covering options.

Both the library and the command line accept plain mappings, for example the
``"state"`` and ``"covering"`` objects of a view configuration file. Keys may
use either the snake_case attribute names or the camelCase names used by
web map styles (``tileSize``, ``minzoom``, ``reparseOverscaled``...).
"""

from __future__ import annotations

import json
from copy import deepcopy
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from .config import (
    DEFAULT_ALTITUDE,
    DEFAULT_LAT_RANGE,
    DEFAULT_MAX_ZOOM,
    DEFAULT_MIN_ZOOM,
    DEFAULT_TILE_SIZE,
)
from .errors import ConfigLoadError, ConfigValidationError

_RANGE = {
    "type": "array",
    "items": {"type": "number"},
    "minItems": 2,
    "maxItems": 2,
}

_LNGLAT = {
    "oneOf": [
        _RANGE,
        {
            "type": "object",
            "required": ["lng", "lat"],
            "properties": {"lng": {"type": "number"}, "lat": {"type": "number"}},
            "additionalProperties": False,
        },
    ]
}

STATE_SCHEMA: dict[str, Any] = {
    "$id": "maptransform/state.schema.json",
    "type": "object",
    "properties": {
        "tile_size": {"type": "integer", "minimum": 1},
        "center": _LNGLAT,
        "zoom": {"type": "number", "minimum": 0},
        "bearing": {"type": "number"},
        "pitch": {"type": "number", "minimum": 0, "exclusiveMaximum": 90},
        "altitude": {"type": "number", "exclusiveMinimum": 0},
        "min_zoom": {"type": "number", "minimum": 0},
        "max_zoom": {"type": "number", "minimum": 0},
        "lng_range": {"oneOf": [_RANGE, {"type": "null"}]},
        "lat_range": _RANGE,
        "width": {"type": "number", "minimum": 0},
        "height": {"type": "number", "minimum": 0},
    },
    "additionalProperties": False,
}

COVERING_OPTIONS_SCHEMA: dict[str, Any] = {
    "$id": "maptransform/covering.schema.json",
    "type": "object",
    "properties": {
        "tile_size": {"type": "integer", "minimum": 1},
        "min_zoom": {"type": "integer", "minimum": 0},
        "max_zoom": {"oneOf": [{"type": "integer", "minimum": 0}, {"type": "null"}]},
        "round_zoom": {"type": "boolean"},
        "reparse_overscaled": {"type": "boolean"},
    },
    "additionalProperties": False,
}

DEFAULT_STATE: dict[str, Any] = {
    "tile_size": DEFAULT_TILE_SIZE,
    "center": [0.0, 0.0],
    "zoom": 0.0,
    "bearing": 0.0,
    "pitch": 0.0,
    "altitude": DEFAULT_ALTITUDE,
    "min_zoom": DEFAULT_MIN_ZOOM,
    "max_zoom": DEFAULT_MAX_ZOOM,
    "lng_range": None,
    "lat_range": list(DEFAULT_LAT_RANGE),
    "width": 0,
    "height": 0,
}

DEFAULT_COVERING_OPTIONS: dict[str, Any] = {
    "tile_size": DEFAULT_TILE_SIZE,
    "min_zoom": 0,
    "max_zoom": None,
    "round_zoom": False,
    "reparse_overscaled": False,
}

_ALIASES: dict[str, str] = {
    "tileSize": "tile_size",
    "minZoom": "min_zoom",
    "maxZoom": "max_zoom",
    "minzoom": "min_zoom",
    "maxzoom": "max_zoom",
    "lngRange": "lng_range",
    "latRange": "lat_range",
    "roundZoom": "round_zoom",
    "reparseOverscaled": "reparse_overscaled",
}

_state_validator = Draft202012Validator(STATE_SCHEMA)
_options_validator = Draft202012Validator(COVERING_OPTIONS_SCHEMA)


def normalise_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Translate camelCase keys to their snake_case attribute names.

    Tuples become lists because the schema only treats lists as arrays.
    """

    return {
        _ALIASES.get(key, key): list(value) if isinstance(value, tuple) else value
        for key, value in data.items()
    }


def _validate(validator: Draft202012Validator, data: dict[str, Any], label: str) -> None:
    try:
        validator.validate(data)
    except ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        raise ConfigValidationError(f"Invalid {label} at {location}: {exc.message}") from exc


def validate_state(data: dict[str, Any]) -> None:
    """Validate a (partial) camera state mapping."""

    _validate(_state_validator, normalise_keys(data), "transform state")


def merge_state_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_STATE` and validate the result."""

    merged = deepcopy(DEFAULT_STATE)
    if data:
        merged.update(normalise_keys(data))
    _validate(_state_validator, merged, "transform state")
    return merged


def merge_options_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_COVERING_OPTIONS` and validate the result."""

    merged = deepcopy(DEFAULT_COVERING_OPTIONS)
    if data:
        merged.update(normalise_keys(data))
    _validate(_options_validator, merged, "covering options")
    return merged


def read_view_config(path: Path | str) -> tuple[dict[str, Any], dict[str, Any]]:
    """Return the merged ``(state, covering)`` mappings stored in *path*."""

    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigLoadError(f"Unable to read view configuration '{path}': {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigLoadError(f"View configuration '{path}' must contain a JSON object")

    state = payload.get("state") or {}
    covering = payload.get("covering") or {}
    if not isinstance(state, dict) or not isinstance(covering, dict):
        raise ConfigLoadError(f"'state' and 'covering' in '{path}' must be JSON objects")
    return merge_state_with_defaults(state), merge_options_with_defaults(covering)


def load_view_config(path: Path | str):
    """Return the ``(TransformState, CoveringOptions)`` stored in *path*."""

    from .geo.transform import CoveringOptions, TransformState

    state, covering = read_view_config(path)
    return TransformState.from_mapping(state), CoveringOptions.from_mapping(covering)


__all__ = [
    "COVERING_OPTIONS_SCHEMA",
    "DEFAULT_COVERING_OPTIONS",
    "DEFAULT_STATE",
    "STATE_SCHEMA",
    "load_view_config",
    "merge_options_with_defaults",
    "merge_state_with_defaults",
    "normalise_keys",
    "read_view_config",
    "validate_state",
]
