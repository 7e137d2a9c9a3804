"""Pytest configuration for cacheaside tests."""

from datetime import timedelta

import pytest

from cacheaside import (
    CacheConfig,
    CacheInvalidator,
    CacheService,
    CacheStore,
    DefaultKeyBuilder,
    InMemoryCacheBackend,
    StoreUnavailableError,
)


class FakeClock:
    """Manually advanced monotonic clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UnavailableBackend:
    """Backend whose store is down: every operation raises."""

    name = "unavailable"

    def __init__(self) -> None:
        self.calls: list[str] = []

    def _fail(self, operation: str) -> None:
        self.calls.append(operation)
        raise StoreUnavailableError(operation, ConnectionError("connection refused"))

    async def get(self, key):
        self._fail("get")

    async def set(self, key, value, ttl=None):
        self._fail("set")

    async def delete(self, key):
        self._fail("delete")

    async def exists(self, key):
        self._fail("exists")

    async def clear(self):
        self._fail("clear")

    async def delete_pattern(self, pattern):
        self._fail("delete_pattern")

    async def keys(self, pattern="*"):
        self._fail("keys")

    async def ttl(self, key):
        self._fail("ttl")

    async def ping(self):
        self._fail("ping")

    async def close(self):
        self._fail("close")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend(clock: FakeClock) -> InMemoryCacheBackend:
    """In-memory backend on a controllable clock."""
    return InMemoryCacheBackend(maxsize=100, default_ttl=300.0, timer=clock)


@pytest.fixture
def config() -> CacheConfig:
    return CacheConfig(default_ttl=timedelta(minutes=5))


@pytest.fixture
def store(backend: InMemoryCacheBackend, config: CacheConfig) -> CacheStore:
    return CacheStore(backend=backend, default_ttl=config.default_ttl)


@pytest.fixture
def cache_service(store: CacheStore, config: CacheConfig) -> CacheService:
    """Create a cache service for testing."""
    return CacheService(store=store, config=config)


@pytest.fixture
def keys() -> DefaultKeyBuilder:
    return DefaultKeyBuilder()


@pytest.fixture
def invalidator(store: CacheStore, keys: DefaultKeyBuilder) -> CacheInvalidator:
    return CacheInvalidator(store, keys)


@pytest.fixture
def unavailable_backend() -> UnavailableBackend:
    return UnavailableBackend()


@pytest.fixture
def unavailable_store(unavailable_backend: UnavailableBackend) -> CacheStore:
    return CacheStore(backend=unavailable_backend)
