"""Cache backend interface."""

from datetime import timedelta
from typing import Protocol


class ICacheBackend(Protocol):
    """Contract for cache storage backends.

    All cache backends must implement this protocol to be used with
    CacheStore. Methods are async to support both in-memory and
    distributed implementations. Backends raise StoreUnavailableError
    when the underlying store cannot be reached; they never swallow it.
    """

    name: str

    async def get(self, key: str) -> bytes | None:
        """Retrieve cached value by key.

        Returns:
            The cached value as bytes, or None if not found or expired.
        """
        ...

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
            ttl: Optional time-to-live. If None, uses backend default.
        """
        ...

    async def delete(self, key: str) -> bool:
        """Delete cached value.

        Returns:
            True if the key existed and was deleted, False otherwise.
        """
        ...

    async def exists(self, key: str) -> bool:
        """Check if key exists in cache."""
        ...

    async def clear(self) -> None:
        """Clear all cached values."""
        ...

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern.

        Args:
            pattern: Glob-style pattern to match keys.

        Returns:
            Number of keys deleted.
        """
        ...

    async def keys(self, pattern: str = "*") -> list[str]:
        """List keys matching a glob-style pattern."""
        ...

    async def ttl(self, key: str) -> int | None:
        """Remaining lifetime of a key in seconds.

        Returns:
            Seconds left, or None if the key is absent or never expires.
        """
        ...

    async def ping(self) -> bool:
        """Check connectivity to the store."""
        ...

    async def close(self) -> None:
        """Release connections held by the backend."""
        ...
