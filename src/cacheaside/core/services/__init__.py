"""Core services for cacheaside."""

from cacheaside.core.services.cache_service import CacheService
from cacheaside.core.services.cache_store import CacheStore
from cacheaside.core.services.inspector import CacheInspector, CacheStats, KeyInfo
from cacheaside.core.services.invalidation import CacheInvalidator, InvalidationResult

__all__ = [
    "CacheInspector",
    "CacheInvalidator",
    "CacheService",
    "CacheStats",
    "CacheStore",
    "InvalidationResult",
    "KeyInfo",
]
