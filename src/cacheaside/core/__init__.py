"""Core domain layer for cacheaside."""

from cacheaside.core.entities import CacheConfig, CacheDuration, CacheKey
from cacheaside.core.exceptions import (
    CacheError,
    ConfigurationError,
    SerializationError,
    StoreUnavailableError,
)
from cacheaside.core.interfaces import ICacheBackend, ISerializer
from cacheaside.core.services import CacheInvalidator, CacheService, CacheStore

__all__ = [
    # Entities
    "CacheConfig",
    "CacheDuration",
    "CacheKey",
    # Errors
    "CacheError",
    "ConfigurationError",
    "SerializationError",
    "StoreUnavailableError",
    # Interfaces
    "ICacheBackend",
    "ISerializer",
    # Services
    "CacheInvalidator",
    "CacheService",
    "CacheStore",
]
