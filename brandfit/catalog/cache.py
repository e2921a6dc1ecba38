from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from .config import DEFAULT_CATALOG_CONFIG
from .loader import load_catalog
from .models import CatalogStats, CatalogTrack
from .stats import compute_catalog_stats

logger = logging.getLogger(__name__)

_DEFAULT_TTL = DEFAULT_CATALOG_CONFIG.ttl_seconds


@dataclass(frozen=True)
class CatalogSnapshot:
    tracks: tuple[CatalogTrack, ...]
    stats: CatalogStats
    loaded_at: float


class CatalogCache:
    """
    Holds the loaded catalog for ``ttl_seconds``.

    A stale or empty cache reloads on the next ``get()``. The snapshot is
    replaced as a whole, so readers never see a half-loaded catalog.
    """

    def __init__(
        self,
        loader: Callable[[], list[CatalogTrack]] = load_catalog,
        ttl_seconds: float = _DEFAULT_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._loader = loader
        self._ttl = ttl_seconds
        self._clock = clock
        self._snapshot: CatalogSnapshot | None = None
        self._hits = 0
        self._misses = 0

    def get(self) -> CatalogSnapshot:
        now = self._clock()
        snapshot = self._snapshot
        if snapshot is not None and now - snapshot.loaded_at < self._ttl:
            self._hits += 1
            return snapshot

        self._misses += 1
        if snapshot is not None:
            logger.info("Catalog cache expired after %.0fs, reloading", now - snapshot.loaded_at)
        tracks = tuple(self._loader())
        snapshot = CatalogSnapshot(tracks=tracks, stats=compute_catalog_stats(tracks), loaded_at=now)
        self._snapshot = snapshot
        return snapshot

    def stats(self) -> dict:
        total = self._hits + self._misses
        snapshot = self._snapshot
        return {
            "size": len(snapshot.tracks) if snapshot else 0,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
            "ttl_seconds": self._ttl,
            "age_seconds": round(self._clock() - snapshot.loaded_at, 1) if snapshot else None,
        }

    def clear(self) -> None:
        self._snapshot = None
        self._hits = 0
        self._misses = 0


_default_cache: CatalogCache | None = None


def get_catalog_cache() -> CatalogCache:
    """Return the process-wide catalog cache, creating it on first call."""
    global _default_cache
    if _default_cache is None:
        _default_cache = CatalogCache()
    return _default_cache
