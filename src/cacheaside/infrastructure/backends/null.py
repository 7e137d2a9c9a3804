"""Null cache backend used when caching is disabled."""

from datetime import timedelta


class NullCacheBackend:
    """Backend that stores nothing.

    Every read is a miss and every write or delete is a no-op, so a
    disabled cache behaves exactly like an always-empty one and call
    sites never check the enable flag themselves.
    """

    name = "disabled"

    async def get(self, key: str) -> bytes | None:
        return None

    async def set(
        self,
        key: str,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> None:
        return None

    async def delete(self, key: str) -> bool:
        return False

    async def exists(self, key: str) -> bool:
        return False

    async def clear(self) -> None:
        return None

    async def delete_pattern(self, pattern: str) -> int:
        return 0

    async def keys(self, pattern: str = "*") -> list[str]:
        return []

    async def ttl(self, key: str) -> int | None:
        return None

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None
