"""Cache store adapter.

The only component that talks to a backend. Everything above it works
with Python values and never sees a store failure: connectivity errors
become misses and no-ops, undecodable entries become misses. Deletions
can opt into raising StoreUnavailableError so the invalidator can record
which steps did not run.
"""

import logging
from collections.abc import Awaitable
from datetime import timedelta
from typing import Any

from cacheaside.core.entities.cache_config import CacheConfig
from cacheaside.core.exceptions import SerializationError, StoreUnavailableError
from cacheaside.core.interfaces.cache_backend import ICacheBackend
from cacheaside.core.interfaces.serializer import ISerializer
from cacheaside.infrastructure.backends.memory import InMemoryCacheBackend
from cacheaside.infrastructure.backends.null import NullCacheBackend
from cacheaside.infrastructure.serializers.json import JsonSerializer

logger = logging.getLogger(__name__)

# OSError covers ConnectionError and TimeoutError leaked by backends that
# do not translate their own failures.
STORE_ERRORS: tuple[type[BaseException], ...] = (StoreUnavailableError, OSError)


class CacheStore:
    """Key-value adapter over a cache backend.

    Owns the backend and the serializer. All methods are safe to call
    concurrently from many tasks; the adapter keeps no state of its own
    beyond those two handles.
    """

    def __init__(
        self,
        backend: ICacheBackend,
        serializer: ISerializer | None = None,
        default_ttl: timedelta | None = None,
    ) -> None:
        """Initialize the cache store.

        Args:
            backend: The cache backend to use for storage.
            serializer: Encoder for values. Defaults to JsonSerializer.
            default_ttl: TTL used when set() is called without one.
        """
        self._backend = backend
        self._serializer = serializer or JsonSerializer()
        self._default_ttl = default_ttl
        self._enabled = not isinstance(backend, NullCacheBackend)

    @classmethod
    def from_config(
        cls,
        config: CacheConfig,
        serializer: ISerializer | None = None,
    ) -> "CacheStore":
        """Build a store with the backend the configuration asks for.

        The choice is made once here: a disabled configuration gets a
        NullCacheBackend, a configured redis_url gets Redis, anything
        else the in-memory backend.
        """
        backend: ICacheBackend
        if not config.enabled:
            backend = NullCacheBackend()
        elif config.redis_url:
            from cacheaside.infrastructure.backends.redis import RedisCacheBackend

            backend = RedisCacheBackend(
                redis_url=config.redis_url,
                key_prefix=config.key_prefix,
                default_ttl=_seconds(config.default_ttl),
            )
        else:
            backend = InMemoryCacheBackend(
                maxsize=config.max_size,
                default_ttl=_seconds(config.default_ttl),
            )

        logger.debug("Cache store using %s backend", backend.name)
        return cls(backend=backend, serializer=serializer, default_ttl=config.default_ttl)

    @property
    def enabled(self) -> bool:
        """False when the store was built in disabled mode."""
        return self._enabled

    @property
    def backend_name(self) -> str:
        return self._backend.name

    async def get(self, key: str) -> Any | None:
        """Return the stored value, or None when absent or unreadable."""
        data = await self._call("get", key, self._backend.get(key), None)
        if data is None:
            return None

        try:
            return self._serializer.deserialize(data)
        except SerializationError as e:
            logger.warning("Discarding undecodable cache entry %s: %s", key, e)
            await self.delete(key)
            return None

    async def get_raw(self, key: str) -> bytes | None:
        """Return the stored bytes without decoding them."""
        return await self._call("get", key, self._backend.get(key), None)

    async def set(
        self,
        key: str,
        value: Any,
        ttl: int | timedelta | None = None,
    ) -> bool:
        """Store a value.

        Args:
            key: The cache key.
            value: Any value the serializer accepts.
            ttl: Lifetime in seconds or as a timedelta. None uses the
                store default.

        Returns:
            True if the value was written, False otherwise.
        """
        try:
            data = self._serializer.serialize(value)
        except SerializationError as e:
            logger.warning("Not caching %s: %s", key, e)
            return False

        if isinstance(ttl, int):
            ttl = timedelta(seconds=ttl)
        effective_ttl = ttl if ttl is not None else self._default_ttl

        result = await self._call(
            "set", key, self._backend.set(key, data, effective_ttl), _FAILED
        )
        return self._enabled and result is not _FAILED

    async def delete(self, key: str, raise_errors: bool = False) -> int:
        """Delete a key. Returns the number of keys removed (0 or 1).

        With raise_errors an unreachable store raises StoreUnavailableError
        instead of reporting 0, so callers can tell "absent" from "failed".
        """
        deleted = await self._call(
            "delete", key, self._backend.delete(key), False, raise_errors=raise_errors
        )
        return 1 if deleted else 0

    async def delete_pattern(self, pattern: str, raise_errors: bool = False) -> int:
        """Delete every key matching a glob pattern.

        Args:
            pattern: Glob pattern.
            raise_errors: Raise StoreUnavailableError instead of
                reporting 0 when the store is unreachable.

        Returns:
            Number of keys deleted.
        """
        return await self._call(
            "delete_pattern",
            pattern,
            self._backend.delete_pattern(pattern),
            0,
            raise_errors=raise_errors,
        )

    async def exists(self, key: str) -> bool:
        return await self._call("exists", key, self._backend.exists(key), False)

    async def keys(self, pattern: str = "*") -> list[str]:
        return await self._call("keys", pattern, self._backend.keys(pattern), [])

    async def ttl(self, key: str) -> int | None:
        return await self._call("ttl", key, self._backend.ttl(key), None)

    async def clear(self) -> bool:
        """Remove every entry. Returns False if the store was unreachable."""
        result = await self._call("clear", "*", self._backend.clear(), _FAILED)
        return result is not _FAILED

    async def health_check(self) -> bool:
        """Check connectivity to the store."""
        return await self._call("ping", "-", self._backend.ping(), False)

    async def close(self) -> None:
        await self._call("close", "-", self._backend.close(), None)

    async def _call(
        self,
        operation: str,
        target: str,
        call: Awaitable[Any],
        fallback: Any,
        raise_errors: bool = False,
    ) -> Any:
        try:
            return await call
        except STORE_ERRORS as e:
            if raise_errors:
                if isinstance(e, StoreUnavailableError):
                    raise
                raise StoreUnavailableError(operation, e) from e
            logger.warning(
                "Cache %s failed for %s, continuing without cache: %s",
                operation,
                target,
                e,
            )
            return fallback


_FAILED = object()


def _seconds(ttl: timedelta | None) -> int | None:
    return None if ttl is None else int(ttl.total_seconds())
