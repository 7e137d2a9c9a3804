"""Infrastructure implementations for cacheaside."""

from cacheaside.infrastructure.backends.memory import InMemoryCacheBackend
from cacheaside.infrastructure.backends.null import NullCacheBackend
from cacheaside.infrastructure.key_builders.default import DefaultKeyBuilder, is_private_key
from cacheaside.infrastructure.serializers.json import JsonSerializer

__all__ = [
    "DefaultKeyBuilder",
    "InMemoryCacheBackend",
    "JsonSerializer",
    "NullCacheBackend",
    "is_private_key",
]
