"""Turn a camera into draw calls and load requests."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ..config import MAX_PARENT_SEARCH_DEPTH
from ..geo.tile_coord import TileCoord
from ..geo.transform import CoveringOptions, Transform
from .tile_store import TileStore

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DrawItem:
    """One tile to draw.

    ``tile`` is the covering tile the item fills; ``coord`` is the tile whose
    data is drawn, which is an ancestor of ``tile`` while ``tile`` is still
    loading.
    """

    tile: TileCoord
    coord: TileCoord
    payload: Any
    pos_matrix: np.ndarray = field(repr=False, compare=False)


@dataclass
class RenderPlan:
    draw: list[DrawItem] = field(default_factory=list)
    requests: list[TileCoord] = field(default_factory=list)


def _source_tile(tile: TileCoord, source_max_zoom: float) -> TileCoord:
    """Return the tile holding the data for a (possibly overscaled) ``tile``."""

    while tile.z > source_max_zoom:
        parent = tile.parent(source_max_zoom)
        if parent is None:
            break
        tile = parent
    return tile


def _loaded_parent(
    tile: TileCoord, store: TileStore, source_max_zoom: float
) -> tuple[TileCoord, Any] | None:
    parent = tile.parent(source_max_zoom)
    for _ in range(MAX_PARENT_SEARCH_DEPTH):
        if parent is None:
            return None
        payload = store.get(parent)
        if payload is not None:
            return parent, payload
        parent = parent.parent(source_max_zoom)
    return None


def plan_render(
    transform: Transform,
    options: CoveringOptions,
    store: TileStore,
    source_max_zoom: float | None = None,
) -> RenderPlan:
    """Work out what to draw for the current camera and what to load.

    Loaded tiles are drawn directly. A tile that is not loaded yet is
    requested from the store and, meanwhile, replaced by its nearest loaded
    ancestor. Requests come out nearest to the viewport centre first.
    """

    if source_max_zoom is None:
        source_max_zoom = options.max_zoom if options.max_zoom is not None else math.inf

    plan = RenderPlan()
    drawn: set[int] = set()

    for tile in transform.covering_tiles(options):
        source = _source_tile(tile, source_max_zoom)
        coord = tile
        payload = store.get(source)
        if payload is None:
            if store.ensure(source):
                plan.requests.append(source.wrapped())
            fallback = _loaded_parent(source, store, source_max_zoom)
            if fallback is None:
                continue
            coord, payload = fallback

        if coord.id in drawn:
            continue
        drawn.add(coord.id)
        plan.draw.append(
            DrawItem(
                tile=tile,
                coord=coord,
                payload=payload,
                pos_matrix=transform.calculate_pos_matrix(coord, source_max_zoom),
            )
        )

    _LOGGER.debug("Render plan: %d draws, %d requests", len(plan.draw), len(plan.requests))
    return plan


__all__ = ["DrawItem", "RenderPlan", "plan_render"]
