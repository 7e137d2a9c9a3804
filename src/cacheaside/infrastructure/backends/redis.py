"""Redis cache backend implementation."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import timedelta

import redis.asyncio as redis
from redis.exceptions import RedisError

from cacheaside.core.exceptions import StoreUnavailableError

SCAN_BATCH_SIZE = 100


class RedisCacheBackend:
    """Redis cache backend for distributed deployments.

    Supports TTL, pattern deletion, and is suitable for multi-process
    and distributed deployments. The client's connection pool is shared
    by every coroutine that uses the backend.

    Any RedisError or OSError is re-raised as StoreUnavailableError.
    """

    name = "redis"

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        key_prefix: str = "",
        default_ttl: int | None = 600,
        client: redis.Redis | None = None,
        socket_timeout: float | None = 5.0,
    ) -> None:
        """Initialize the Redis cache backend.

        Args:
            redis_url: Redis connection URL. Ignored when client is given.
            key_prefix: Namespace prepended to every key, for sharing a
                database with other applications. Empty means none.
            default_ttl: Default TTL in seconds, or None for no expiry.
            client: Pre-built asyncio Redis client.
            socket_timeout: Socket timeout in seconds for new clients.
        """
        self._redis: redis.Redis = client or redis.from_url(  # type: ignore[no-untyped-call]
            redis_url,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        self._key_prefix = key_prefix
        self._default_ttl = default_ttl

    async def get(self, key: str) -> bytes | None:
        with self._translate_errors("get"):
            return await self._redis.get(self._prefixed_key(key))

    async def set(
        self,
        key: str,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> None:
        """Store value with optional TTL.

        Args:
            key: The cache key.
            value: The value to store as bytes.
            ttl: Optional time-to-live. If None, uses default.
        """
        prefixed_key = self._prefixed_key(key)

        with self._translate_errors("set"):
            if ttl is not None:
                await self._redis.setex(prefixed_key, max(1, int(ttl.total_seconds())), value)
            elif self._default_ttl is not None:
                await self._redis.setex(prefixed_key, self._default_ttl, value)
            else:
                await self._redis.set(prefixed_key, value)

    async def delete(self, key: str) -> bool:
        with self._translate_errors("delete"):
            result = await self._redis.delete(self._prefixed_key(key))
        return result > 0

    async def exists(self, key: str) -> bool:
        with self._translate_errors("exists"):
            result = await self._redis.exists(self._prefixed_key(key))
        return result > 0

    async def clear(self) -> None:
        """Clear all cached values.

        With a key prefix only our own keys are removed; without one the
        whole database is flushed.
        """
        if self._key_prefix:
            await self.delete_pattern("*")
            return

        with self._translate_errors("clear"):
            await self._redis.flushdb()

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching a pattern using SCAN.

        Uses SCAN instead of KEYS for production safety.

        Args:
            pattern: Redis glob pattern.

        Returns:
            Number of keys deleted.
        """
        count = 0
        cursor = 0

        with self._translate_errors("delete_pattern"):
            while True:
                cursor, keys = await self._redis.scan(
                    cursor, match=self._prefixed_key(pattern), count=SCAN_BATCH_SIZE
                )

                if keys:
                    count += await self._redis.delete(*keys)

                if cursor == 0:
                    break

        return count

    async def keys(self, pattern: str = "*") -> list[str]:
        found: list[str] = []
        with self._translate_errors("keys"):
            async for raw in self._redis.scan_iter(
                match=self._prefixed_key(pattern), count=SCAN_BATCH_SIZE
            ):
                key = raw.decode() if isinstance(raw, bytes) else raw
                found.append(self._unprefixed_key(key))
        return found

    async def ttl(self, key: str) -> int | None:
        with self._translate_errors("ttl"):
            remaining = await self._redis.ttl(self._prefixed_key(key))
        # -2: no such key, -1: no expiry
        return remaining if remaining >= 0 else None

    async def ping(self) -> bool:
        with self._translate_errors("ping"):
            return bool(await self._redis.ping())

    def _prefixed_key(self, key: str) -> str:
        """Map a logical key to its Redis key.

        The prefix is always added, so logical keys "app:x" and "x" never
        share a Redis key.
        """
        if not self._key_prefix:
            return key
        return f"{self._key_prefix}:{key}"

    def _unprefixed_key(self, key: str) -> str:
        if self._key_prefix and key.startswith(f"{self._key_prefix}:"):
            return key[len(self._key_prefix) + 1 :]
        return key

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except (RedisError, OSError) as e:
            raise StoreUnavailableError(operation, e) from e

    async def close(self) -> None:
        """Close the Redis connection."""
        await self._redis.aclose()

    async def __aenter__(self) -> "RedisCacheBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.close()
