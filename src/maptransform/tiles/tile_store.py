"""In-memory LRU store for tile payloads."""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

from ..config import DEFAULT_CACHE_LIMIT
from ..geo.tile_coord import TileCoord

_LOGGER = logging.getLogger(__name__)


class TileStore:
    """Track loaded, pending and missing tiles.

    Tile data is the same in every world copy, so entries are keyed by
    ``coord.wrapped().id``: the tile east of the antimeridian and its
    canonical twin share one slot.
    """

    def __init__(
        self,
        *,
        cache_limit: int = DEFAULT_CACHE_LIMIT,
        on_evicted: Callable[[TileCoord], None] | None = None,
    ) -> None:
        self._cache_limit = cache_limit
        self._on_evicted = on_evicted

        self._tiles: OrderedDict[int, tuple[TileCoord, Any]] = OrderedDict()
        self._pending: dict[int, TileCoord] = {}
        self._missing: set[int] = set()

    @staticmethod
    def _key(coord: TileCoord) -> int:
        return coord.wrapped().id

    # ------------------------------------------------------------------
    def get(self, coord: TileCoord) -> Any | None:
        """Return the payload for ``coord``, updating the LRU ordering when found."""

        key = self._key(coord)
        entry = self._tiles.get(key)
        if entry is None:
            return None
        self._tiles.move_to_end(key)
        return entry[1]

    # ------------------------------------------------------------------
    def put(self, coord: TileCoord, payload: Any) -> None:
        """Store ``payload`` for ``coord`` and evict the oldest entries over the limit.

        ``None`` is what :meth:`get` returns for an unloaded tile, so it is not
        a valid payload; tiles without data go through :meth:`mark_missing`.
        """

        if payload is None:
            raise ValueError(f"Cannot store a None payload for tile {coord}; use mark_missing()")

        key = self._key(coord)
        self._pending.pop(key, None)
        self._missing.discard(key)
        self._tiles[key] = (coord.wrapped(), payload)
        self._tiles.move_to_end(key)

        while len(self._tiles) > self._cache_limit:
            _, (evicted, _) = self._tiles.popitem(last=False)
            _LOGGER.debug("Evicted tile %s from the store", evicted)
            if self._on_evicted is not None:
                self._on_evicted(evicted)

    # ------------------------------------------------------------------
    def ensure(self, coord: TileCoord) -> bool:
        """Record a load request for ``coord``.

        Returns ``True`` only for a new request: tiles that are loaded,
        already pending or known to be missing are not requested again.
        """

        key = self._key(coord)
        if key in self._tiles or key in self._pending or key in self._missing:
            return False
        self._pending[key] = coord.wrapped()
        return True

    # ------------------------------------------------------------------
    def mark_missing(self, coord: TileCoord) -> None:
        """Remember that ``coord`` has no data."""

        key = self._key(coord)
        self._pending.pop(key, None)
        self._missing.add(key)
        if self._tiles.pop(key, None) is not None and self._on_evicted is not None:
            self._on_evicted(coord.wrapped())

    def is_missing(self, coord: TileCoord) -> bool:
        return self._key(coord) in self._missing

    def pending(self) -> set[TileCoord]:
        """Expose the in-flight requests for diagnostics/testing."""

        return set(self._pending.values())

    # ------------------------------------------------------------------
    def discard(self, coord: TileCoord) -> None:
        """Forget everything known about ``coord``."""

        key = self._key(coord)
        self._tiles.pop(key, None)
        self._pending.pop(key, None)
        self._missing.discard(key)

    def clear(self) -> None:
        self._tiles.clear()
        self._pending.clear()
        self._missing.clear()

    def __len__(self) -> int:
        return len(self._tiles)

    def __contains__(self, coord: object) -> bool:
        return isinstance(coord, TileCoord) and self._key(coord) in self._tiles


__all__ = ["TileStore"]
