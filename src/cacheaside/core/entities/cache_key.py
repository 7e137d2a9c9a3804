"""Cache key value object.

Key format: {prefix}:{part}:{part}...

The prefix names the resource ("user", "users:list", "dashboard") so
keys from different domains can never collide. Patterns are keys with
a glob wildcard segment, matched with Redis SCAN semantics.
"""

from dataclasses import dataclass
from typing import Any

KEY_SEPARATOR = ":"
WILDCARD = "*"


@dataclass(frozen=True)
class CacheKey:
    """Immutable cache key value object.

    Empty parts (None or "") are dropped, so an unset optional filter
    yields the same key as one that was never passed.
    """

    prefix: str
    parts: tuple[str, ...] = ()

    def __str__(self) -> str:
        """Return the full cache key string."""
        return KEY_SEPARATOR.join(s for s in (self.prefix, *self.parts) if s)

    def pattern(self, wildcard: str = WILDCARD) -> str:
        """Return a pattern matching every key nested under this one."""
        return f"{self}{KEY_SEPARATOR}{wildcard}"

    @classmethod
    def from_components(cls, prefix: str, *parts: Any) -> "CacheKey":
        """Create a CacheKey from raw components.

        Args:
            prefix: Resource namespace.
            *parts: Qualifiers. Non-string values are converted with str().

        Returns:
            A new CacheKey instance.
        """
        return cls(
            prefix=prefix,
            parts=tuple(str(p) for p in parts if p is not None and p != ""),
        )


def build_key(prefix: str, *parts: Any) -> str:
    """Build a deterministic cache key.

    >>> build_key("user", 42, "permissions")
    'user:42:permissions'
    """
    return str(CacheKey.from_components(prefix, *parts))


def build_pattern(prefix: str, *parts: Any, wildcard: str = WILDCARD) -> str:
    """Build a pattern matching a family of keys.

    >>> build_pattern("users", "list")
    'users:list:*'
    """
    return CacheKey.from_components(prefix, *parts).pattern(wildcard)
