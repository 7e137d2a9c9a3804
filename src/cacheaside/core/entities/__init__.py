"""Domain entities for cacheaside."""

from cacheaside.core.entities.cache_config import CacheConfig
from cacheaside.core.entities.cache_duration import (
    DEFAULT_DURATION_SECONDS,
    CacheDuration,
)
from cacheaside.core.entities.cache_key import CacheKey, build_key, build_pattern

__all__ = [
    "CacheConfig",
    "CacheDuration",
    "CacheKey",
    "DEFAULT_DURATION_SECONDS",
    "build_key",
    "build_pattern",
]
