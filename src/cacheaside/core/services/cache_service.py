"""Cache service - read-through and forced-refresh orchestration."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from cacheaside.core.entities.cache_config import CacheConfig
from cacheaside.core.entities.cache_duration import CacheDuration
from cacheaside.core.services.cache_store import CacheStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

Fetcher = Callable[[], Awaitable[T]]


class CacheService:
    """Domain service that wraps data fetchers with the cache.

    This is the main entry point for route handlers. It composes a
    CacheStore with the configuration that maps duration classes to
    TTLs.

    Concurrent misses on one key are not coalesced: each caller runs the
    fetcher and the last write wins. Fetchers are expected to be
    idempotent reads.
    """

    def __init__(
        self,
        store: CacheStore,
        config: CacheConfig | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            store: The cache store adapter.
            config: Optional cache configuration. Uses defaults if not provided.
        """
        self._store = store
        self._config = config or CacheConfig()

        # Statistics
        self._hits = 0
        self._misses = 0
        self._refreshes = 0

    @classmethod
    def from_config(cls, config: CacheConfig) -> "CacheService":
        """Create a service and its store from configuration."""
        return cls(store=CacheStore.from_config(config), config=config)

    @property
    def config(self) -> CacheConfig:
        """Get the cache configuration."""
        return self._config

    @property
    def store(self) -> CacheStore:
        return self._store

    @property
    def stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, refreshes, and total requests.
        """
        return {
            "hits": self._hits,
            "misses": self._misses,
            "refreshes": self._refreshes,
            "total": self._hits + self._misses + self._refreshes,
        }

    async def with_cache(
        self,
        fetcher: Fetcher[T],
        key: str,
        duration: CacheDuration | str = CacheDuration.MEDIUM,
    ) -> T:
        """Return the cached value for key, computing it on a miss.

        Args:
            fetcher: Zero-argument coroutine function producing the
                authoritative value.
            key: Cache key for the value.
            duration: Duration class selecting the TTL.

        Returns:
            The cached or freshly fetched value.

        Raises:
            ValueError: If duration is not a known duration class. Raised
                before the fetcher runs.
            Exception: Whatever fetcher raises. Nothing is cached then.
        """
        ttl = self._config.ttl_for(duration)
        cached: Any = await self._store.get(key)
        if cached is not None:
            self._hits += 1
            logger.debug("Cache hit: %s", key)
            return cached

        self._misses += 1
        logger.debug("Cache miss: %s", key)
        value = await fetcher()
        await self._populate(key, value, ttl)
        return value

    async def re_cache(
        self,
        fetcher: Fetcher[T],
        key: str,
        duration: CacheDuration | str = CacheDuration.MEDIUM,
    ) -> T:
        """Drop the cached value for key, recompute it and store it again.

        Used when a caller explicitly asks for fresh data but later reads
        should still be served from the cache.

        Raises:
            Exception: Whatever fetcher raises. The key stays deleted.
        """
        ttl = self._config.ttl_for(duration)
        self._refreshes += 1
        await self._store.delete(key)
        logger.debug("Cache invalidated for re-caching: %s", key)

        value = await fetcher()
        await self._populate(key, value, ttl)
        return value

    async def fetch(
        self,
        fetcher: Fetcher[T],
        key: str,
        duration: CacheDuration | str = CacheDuration.MEDIUM,
        refresh: bool = False,
    ) -> T:
        """Read through the cache, or force a refresh when refresh is set.

        Route handlers pass hints.wants_refresh(request.query_params) as
        refresh so that a `_refresh` parameter bypasses the cached copy.
        """
        if refresh:
            return await self.re_cache(fetcher, key, duration)
        return await self.with_cache(fetcher, key, duration)

    async def clear(self) -> bool:
        """Clear all cached entries and reset statistics."""
        self._hits = 0
        self._misses = 0
        self._refreshes = 0
        return await self._store.clear()

    async def _populate(self, key: str, value: Any, ttl: int) -> None:
        if value is None:
            logger.debug("Not caching empty result for %s", key)
            return

        if await self._store.set(key, value, ttl):
            logger.debug("Cached %s for %ss", key, ttl)
