"""cacheaside - cache-aside layer for async web applications.

Wraps data fetchers with a read-through cache, offers a forced-refresh
path, and invalidates the keys that depend on an entity after a
mutation. The store is Redis, an in-process LRU, or a null store when
caching is disabled; store failures only ever cost latency.

Example:
    from cacheaside import (
        CacheConfig,
        CacheDuration,
        CacheInvalidator,
        CacheService,
        DefaultKeyBuilder,
    )
    from cacheaside.hints import wants_refresh

    config = CacheConfig.from_env()
    service = CacheService.from_config(config)
    invalidator = CacheInvalidator(service.store)
    keys = DefaultKeyBuilder()

    # Read path
    permissions = await service.fetch(
        lambda: db.get_user_permissions(user_id),
        key=keys.user_permissions(user_id),
        duration=CacheDuration.LONG,
        refresh=wants_refresh(request.query_params),
    )

    # Write path
    await db.update_user(user_id, data)
    await invalidator.invalidate_all_user_related(user_id)
"""

from cacheaside.core.entities import (
    DEFAULT_DURATION_SECONDS,
    CacheConfig,
    CacheDuration,
    CacheKey,
    build_key,
    build_pattern,
)
from cacheaside.core.exceptions import (
    CacheError,
    ConfigurationError,
    SerializationError,
    StoreUnavailableError,
)
from cacheaside.core.interfaces import ICacheBackend, ISerializer
from cacheaside.core.services import (
    CacheInspector,
    CacheInvalidator,
    CacheService,
    CacheStats,
    CacheStore,
    InvalidationResult,
    KeyInfo,
)
from cacheaside.decorators import cached, invalidates
from cacheaside.hints import REFRESH_PARAM, wants_refresh
from cacheaside.infrastructure import (
    DefaultKeyBuilder,
    InMemoryCacheBackend,
    JsonSerializer,
    NullCacheBackend,
    is_private_key,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core entities
    "CacheConfig",
    "CacheDuration",
    "CacheKey",
    "DEFAULT_DURATION_SECONDS",
    "build_key",
    "build_pattern",
    # Errors
    "CacheError",
    "ConfigurationError",
    "SerializationError",
    "StoreUnavailableError",
    # Core interfaces
    "ICacheBackend",
    "ISerializer",
    # Core services
    "CacheStore",
    "CacheService",
    "CacheInvalidator",
    "InvalidationResult",
    "CacheInspector",
    "CacheStats",
    "KeyInfo",
    # Infrastructure implementations
    "InMemoryCacheBackend",
    "NullCacheBackend",
    "DefaultKeyBuilder",
    "JsonSerializer",
    "is_private_key",
    # Decorators and hints
    "cached",
    "invalidates",
    "REFRESH_PARAM",
    "wants_refresh",
]
