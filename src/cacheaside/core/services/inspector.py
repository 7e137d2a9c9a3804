"""Read-only views over the cache for administration screens.

Lists keys with their TTL, size and privacy, shows single entries and
aggregates statistics by key namespace. Private keys (per-user data)
are only visible to the user they belong to.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from cacheaside.core.entities.cache_key import KEY_SEPARATOR
from cacheaside.core.services.cache_store import CacheStore
from cacheaside.infrastructure.key_builders.default import DefaultKeyBuilder

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 200


@dataclass
class KeyInfo:
    """One cache entry as shown to an operator."""

    key: str
    ttl: int | None
    size: int
    private: bool
    value: Any = None
    value_preview: str | None = None

    @property
    def namespace(self) -> str:
        return self.key.split(KEY_SEPARATOR, 1)[0]

    @property
    def size_formatted(self) -> str:
        return format_bytes(self.size)


@dataclass
class CacheStats:
    """Aggregate view of the visible cache entries."""

    backend: str
    enabled: bool
    total_keys: int = 0
    total_size: int = 0
    keys_by_namespace: dict[str, int] = field(default_factory=dict)
    size_by_namespace: dict[str, int] = field(default_factory=dict)
    keys: list[KeyInfo] = field(default_factory=list)

    @property
    def total_size_formatted(self) -> str:
        return format_bytes(self.total_size)


def format_bytes(size: int) -> str:
    """Human readable byte count, e.g. 1536 -> '1.5 KB'."""
    value = float(size)
    for unit in ("B", "KB", "MB"):
        if value < 1024:
            return f"{value:.2f}".rstrip("0").rstrip(".") + f" {unit}"
        value /= 1024
    return f"{value:.2f}".rstrip("0").rstrip(".") + " GB"


class CacheInspector:
    """Inspects and manages cache entries through a CacheStore."""

    def __init__(
        self,
        store: CacheStore,
        keys: DefaultKeyBuilder | None = None,
    ) -> None:
        self._store = store
        self._keys = keys or DefaultKeyBuilder()

    def is_visible(self, key: str, viewer_id: str | None, own_only: bool = False) -> bool:
        """Apply the visibility rules for a viewer.

        own_only shows only keys owned by the viewer. Otherwise public
        keys are always shown and private keys only to their owner.
        """
        if own_only or self._keys.is_private(key):
            return self.is_owner(key, viewer_id)
        return True

    def is_owner(self, key: str, viewer_id: str | None) -> bool:
        """True if viewer_id is one whole segment of the key.

        "1" owns profile:1 and user:1:groups but not profile:12.
        """
        if not viewer_id:
            return False
        return viewer_id in self._keys.strip_namespace(key).split(KEY_SEPARATOR)

    async def list_entries(
        self,
        pattern: str = "*",
        viewer_id: str | None = None,
        own_only: bool = False,
    ) -> list[KeyInfo]:
        """List visible entries matching pattern, sorted by key."""
        entries: list[KeyInfo] = []
        for key in sorted(await self._store.keys(pattern)):
            if not self.is_visible(key, viewer_id, own_only):
                continue
            info = await self._describe(key, with_value=False)
            if info is not None:
                entries.append(info)
        return entries

    async def get_entry(self, key: str, viewer_id: str | None = None) -> KeyInfo | None:
        """Return one entry with its decoded value.

        Returns None if the key is absent or private to another user.
        """
        if not self.is_visible(key, viewer_id):
            return None
        return await self._describe(key, with_value=True)

    async def delete_entry(self, key: str) -> bool:
        deleted = await self._store.delete(key) > 0
        logger.info("Cache key deleted by operator: %s (existed=%s)", key, deleted)
        return deleted

    async def flush(self) -> bool:
        flushed = await self._store.clear()
        logger.info("Cache flushed by operator (ok=%s)", flushed)
        return flushed

    async def stats(
        self,
        pattern: str = "*",
        viewer_id: str | None = None,
        own_only: bool = False,
    ) -> CacheStats:
        entries = await self.list_entries(pattern, viewer_id, own_only)
        result = CacheStats(
            backend=self._store.backend_name,
            enabled=self._store.enabled,
            keys=entries,
        )
        for entry in entries:
            result.total_keys += 1
            result.total_size += entry.size
            ns = entry.namespace
            result.keys_by_namespace[ns] = result.keys_by_namespace.get(ns, 0) + 1
            result.size_by_namespace[ns] = result.size_by_namespace.get(ns, 0) + entry.size
        return result

    async def _describe(self, key: str, with_value: bool) -> KeyInfo | None:
        raw = await self._store.get_raw(key)
        if raw is None:
            # Expired or deleted between listing and reading.
            return None

        preview = raw[:PREVIEW_LENGTH].decode("utf-8", errors="replace")
        if len(raw) > PREVIEW_LENGTH:
            preview += "..."

        return KeyInfo(
            key=key,
            ttl=await self._store.ttl(key),
            size=len(raw),
            private=self._keys.is_private(key),
            value=await self._store.get(key) if with_value else None,
            value_preview=preview,
        )
