"""Tests for InMemoryCacheBackend and NullCacheBackend."""

from datetime import timedelta

import pytest

from cacheaside.infrastructure.backends.memory import InMemoryCacheBackend
from cacheaside.infrastructure.backends.null import NullCacheBackend


class TestInMemoryCacheBackend:
    """Tests for InMemoryCacheBackend."""

    async def test_set_and_get(self, backend: InMemoryCacheBackend) -> None:
        """Test basic set and get operations."""
        await backend.set("key1", b"value1")

        assert await backend.get("key1") == b"value1"

    async def test_get_missing_key(self, backend: InMemoryCacheBackend) -> None:
        assert await backend.get("nonexistent") is None

    async def test_overwrite(self, backend: InMemoryCacheBackend) -> None:
        await backend.set("key1", b"old")
        await backend.set("key1", b"new")

        assert await backend.get("key1") == b"new"
        assert len(backend) == 1

    async def test_delete(self, backend: InMemoryCacheBackend) -> None:
        """Test deleting a key."""
        await backend.set("key1", b"value1")

        assert await backend.delete("key1") is True
        assert await backend.get("key1") is None
        assert await backend.delete("key1") is False

    async def test_exists(self, backend: InMemoryCacheBackend) -> None:
        await backend.set("key1", b"value1")

        assert await backend.exists("key1") is True
        assert await backend.exists("nonexistent") is False

    async def test_clear(self, backend: InMemoryCacheBackend) -> None:
        await backend.set("key1", b"value1")
        await backend.set("key2", b"value2")

        await backend.clear()

        assert len(backend) == 0

    async def test_delete_pattern(self, backend: InMemoryCacheBackend) -> None:
        """Test deleting keys by pattern."""
        await backend.set("user:1", b"alice")
        await backend.set("user:2", b"bob")
        await backend.set("post:1", b"hello")

        assert await backend.delete_pattern("user:*") == 2
        assert await backend.get("user:1") is None
        assert await backend.get("post:1") == b"hello"

    async def test_pattern_is_case_sensitive(self, backend: InMemoryCacheBackend) -> None:
        await backend.set("User:1", b"x")

        assert await backend.delete_pattern("user:*") == 0
        assert await backend.keys("User:*") == ["User:1"]

    async def test_pattern_wildcard_in_middle(self, backend: InMemoryCacheBackend) -> None:
        await backend.set("user:1:permissions", b"x")
        await backend.set("user:1:groups", b"x")

        assert await backend.keys("user:*:permissions") == ["user:1:permissions"]

    async def test_explicit_ttl_expires(self, backend: InMemoryCacheBackend, clock) -> None:
        """Test that an entry disappears once its TTL elapsed."""
        await backend.set("key1", b"value1", ttl=timedelta(seconds=10))

        clock.advance(9)
        assert await backend.get("key1") == b"value1"
        assert await backend.ttl("key1") == 1

        clock.advance(1)
        assert await backend.get("key1") is None
        assert await backend.exists("key1") is False

    async def test_default_ttl(self, backend: InMemoryCacheBackend, clock) -> None:
        await backend.set("key1", b"value1")

        assert await backend.ttl("key1") == 300

        clock.advance(300)
        assert await backend.get("key1") is None

    async def test_per_entry_ttl(self, backend: InMemoryCacheBackend, clock) -> None:
        await backend.set("short", b"x", ttl=timedelta(seconds=5))
        await backend.set("long", b"y", ttl=timedelta(hours=1))

        clock.advance(60)

        assert await backend.keys() == ["long"]

    async def test_no_expiry(self, clock) -> None:
        backend = InMemoryCacheBackend(default_ttl=None, timer=clock)
        await backend.set("key1", b"value1")

        clock.advance(10**9)

        assert await backend.get("key1") == b"value1"
        assert await backend.ttl("key1") is None

    async def test_ttl_missing_key(self, backend: InMemoryCacheBackend) -> None:
        assert await backend.ttl("nonexistent") is None

    async def test_lru_eviction(self, clock) -> None:
        """Test that the least recently used entry is evicted at maxsize."""
        backend = InMemoryCacheBackend(maxsize=2, timer=clock)

        await backend.set("a", b"1")
        await backend.set("b", b"2")
        await backend.get("a")
        await backend.set("c", b"3")

        assert await backend.get("a") == b"1"
        assert await backend.get("b") is None
        assert await backend.get("c") == b"3"
        assert len(backend) == 2

    async def test_ping_and_close(self, backend: InMemoryCacheBackend) -> None:
        assert await backend.ping() is True
        await backend.close()

    def test_maxsize(self) -> None:
        assert InMemoryCacheBackend(maxsize=7).maxsize == 7


class TestNullCacheBackend:
    """Tests for the disabled-cache backend."""

    @pytest.fixture
    def null_backend(self) -> NullCacheBackend:
        return NullCacheBackend()

    async def test_stores_nothing(self, null_backend: NullCacheBackend) -> None:
        await null_backend.set("key1", b"value1", ttl=timedelta(seconds=10))

        assert await null_backend.get("key1") is None
        assert await null_backend.exists("key1") is False
        assert await null_backend.keys() == []
        assert await null_backend.ttl("key1") is None

    async def test_deletes_are_noops(self, null_backend: NullCacheBackend) -> None:
        assert await null_backend.delete("key1") is False
        assert await null_backend.delete_pattern("*") == 0
        await null_backend.clear()

    async def test_ping(self, null_backend: NullCacheBackend) -> None:
        assert await null_backend.ping() is True
        assert null_backend.name == "disabled"
