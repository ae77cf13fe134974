"""In-memory TTL cache with serialized asynchronous access."""
from __future__ import annotations

import asyncio
import copy
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar


K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_LOGGER = logging.getLogger(__name__)


@dataclass
class _CacheEntry(Generic[V]):
    value: V
    written_at: float


class TTLCache(Generic[K, V]):
    """Key/value cache whose entries go stale ``ttl_seconds`` after a write.

    Expiry is lazy: a stale entry is only removed when ``get`` touches it, so
    ``count`` reports raw occupancy including entries that are already stale.
    Every operation runs under one ``asyncio.Lock``; concurrent coroutines see
    the operations take effect one at a time.

    Values are deep-copied on the way in and on the way out unless
    ``copy_values`` is disabled, so callers never hold a reference into the
    cache's storage.
    """

    def __init__(
        self,
        ttl_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        copy_values: bool = True,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._copy_values = copy_values
        self._storage: Dict[K, _CacheEntry[V]] = {}
        self._lock = asyncio.Lock()

    @property
    def ttl(self) -> float:
        return self._ttl

    async def get(self, key: K) -> Optional[V]:
        async with self._lock:
            entry = self._storage.get(key)
            if entry is None:
                return None
            if self._is_stale(entry):
                del self._storage[key]
                _LOGGER.debug("cache_evict key=%r ttl=%s", key, self._ttl)
                return None
            return self._copy(entry.value)

    async def set(self, key: K, value: V) -> None:
        async with self._lock:
            self._storage[key] = _CacheEntry(value=self._copy(value), written_at=self._clock())

    async def clear(self) -> None:
        async with self._lock:
            dropped = len(self._storage)
            self._storage.clear()
        _LOGGER.debug("cache_clear dropped=%d", dropped)

    async def count(self) -> int:
        """Number of stored entries, stale ones included."""
        async with self._lock:
            return len(self._storage)

    def _is_stale(self, entry: _CacheEntry[V]) -> bool:
        # A non-positive TTL makes every entry stale as soon as it is written.
        if self._ttl <= 0:
            return True
        return self._clock() - entry.written_at > self._ttl

    def _copy(self, value: V) -> V:
        if not self._copy_values:
            return value
        return copy.deepcopy(value)


__all__ = ["TTLCache"]
