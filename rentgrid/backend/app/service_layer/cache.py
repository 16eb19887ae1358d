# app/service_layer/cache.py
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from ..config import settings
from ..schemas import TileCollection

CacheKey = tuple[int | None, str]  # (bedrooms, regime)


@dataclass
class _Entry:
    built_at: float
    value: TileCollection


@dataclass
class HeatmapCache:
    """
    Per-process, in-memory heat maps keyed by (bedrooms, regime).
    Nothing here is persisted; a restart rebuilds from the listing source.
    """

    ttl_s: float
    clock: Callable[[], float] = time.monotonic
    _entries: dict[CacheKey, _Entry] = field(default_factory=dict)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def get(self, key: CacheKey) -> TileCollection | None:
        e = self._entries.get(key)
        if e is None:
            return None
        if (self.clock() - e.built_at) > self.ttl_s:
            return None
        return e.value

    def put(self, key: CacheKey, value: TileCollection) -> None:
        self._entries[key] = _Entry(built_at=self.clock(), value=value)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    async def get_or_build(self, key: CacheKey, build: Callable[[], Awaitable[TileCollection]]) -> TileCollection:
        hit = self.get(key)
        if hit is not None:
            return hit
        async with self._lock:
            hit = self.get(key)
            if hit is not None:
                return hit
            value = await build()
            self.put(key, value)
            return value

    async def rebuild(self, key: CacheKey, build: Callable[[], Awaitable[TileCollection]]) -> TileCollection:
        async with self._lock:
            value = await build()
            self.put(key, value)
            return value


heatmap_cache = HeatmapCache(ttl_s=float(settings.CACHE_TTL_S))
