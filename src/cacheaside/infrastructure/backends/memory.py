"""In-memory cache backend implementation."""

import fnmatch
import math
import time
from collections.abc import Callable
from datetime import timedelta
from typing import NamedTuple

from cachetools import TLRUCache  # type: ignore[import-untyped]


class _Item(NamedTuple):
    data: bytes
    expires_at: float


def _time_to_use(_key: str, item: _Item, _now: float) -> float:
    return item.expires_at


class InMemoryCacheBackend:
    """In-memory cache backend using LRU with per-entry TTL.

    Suitable for single-process deployments and tests. Uses cachetools
    TLRUCache so each entry expires on its own TTL and the least
    recently used entry is evicted once maxsize is reached.

    Pattern matching is case-sensitive glob, like Redis SCAN MATCH.
    """

    name = "memory"

    def __init__(
        self,
        maxsize: int = 1000,
        default_ttl: float | None = 300.0,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory cache backend.

        Args:
            maxsize: Maximum number of items in the cache.
            default_ttl: Default TTL in seconds, or None for no expiry.
            timer: Clock used for expiry. Must match TLRUCache semantics
                (monotonic seconds as float).
        """
        self._maxsize = maxsize
        self._default_ttl = default_ttl
        self._timer = timer
        self._cache: TLRUCache[str, _Item] = TLRUCache(
            maxsize=maxsize,
            ttu=_time_to_use,
            timer=timer,
        )

    async def get(self, key: str) -> bytes | None:
        item = self._cache.get(key)
        return item.data if item is not None else None

    async def set(
        self,
        key: str,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> None:
        if ttl is not None:
            seconds: float | None = ttl.total_seconds()
        else:
            seconds = self._default_ttl

        expires_at = math.inf if seconds is None else self._timer() + seconds
        self._cache[key] = _Item(value, expires_at)

    async def delete(self, key: str) -> bool:
        try:
            del self._cache[key]
            return True
        except KeyError:
            return False

    async def exists(self, key: str) -> bool:
        return key in self._cache

    async def clear(self) -> None:
        self._cache.clear()

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern.

        Args:
            pattern: Glob-style pattern to match keys.

        Returns:
            Number of keys deleted.
        """
        count = 0
        for key in await self.keys(pattern):
            try:
                del self._cache[key]
                count += 1
            except KeyError:
                pass

        return count

    async def keys(self, pattern: str = "*") -> list[str]:
        self._cache.expire()
        return [key for key in list(self._cache.keys()) if fnmatch.fnmatchcase(key, pattern)]

    async def ttl(self, key: str) -> int | None:
        item = self._cache.get(key)
        if item is None or item.expires_at == math.inf:
            return None
        return max(0, math.ceil(item.expires_at - self._timer()))

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        """Nothing to release; kept for interface parity."""

    def __len__(self) -> int:
        """Return the number of items in the cache."""
        return len(self._cache)

    @property
    def maxsize(self) -> int:
        """Return the maximum size of the cache."""
        return self._maxsize
