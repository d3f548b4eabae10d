"""Tile bookkeeping for a render loop driven by :class:`~maptransform.Transform`."""

from .tile_collector import DrawItem, RenderPlan, plan_render
from .tile_store import TileStore

__all__ = ["DrawItem", "RenderPlan", "TileStore", "plan_render"]
