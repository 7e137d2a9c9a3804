"""Cache configuration entity."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta

from cacheaside.core.entities.cache_duration import (
    DEFAULT_DURATION_SECONDS,
    CacheDuration,
)
from cacheaside.core.exceptions import ConfigurationError

_DURATION_ENV_VARS: dict[CacheDuration, str] = {
    CacheDuration.SHORT: "REDIS_SHORT_TTL",
    CacheDuration.MEDIUM: "REDIS_MEDIUM_TTL",
    CacheDuration.LONG: "REDIS_LONG_TTL",
    CacheDuration.VERY_LONG: "REDIS_VERY_LONG_TTL",
}


@dataclass
class CacheConfig:
    """Cache configuration.

    Provides configuration options for the caching system: the global
    enable flag, where the store lives, and the TTL of each duration
    class.

    When enabled is False, CacheStore.from_config builds a null store
    and every read falls through to the fetcher.
    """

    enabled: bool = True
    default_ttl: timedelta | None = None
    key_prefix: str = ""
    redis_url: str | None = None
    max_size: int = 1000
    durations: dict[CacheDuration, int] = field(
        default_factory=lambda: dict(DEFAULT_DURATION_SECONDS)
    )

    def __post_init__(self) -> None:
        """Set default TTL and fill in missing duration classes."""
        if self.default_ttl is None:
            self.default_ttl = timedelta(minutes=10)
        for duration, seconds in DEFAULT_DURATION_SECONDS.items():
            self.durations.setdefault(duration, seconds)

    def ttl_for(self, duration: CacheDuration | str) -> int:
        """Resolve a duration class to seconds.

        Args:
            duration: A CacheDuration or its string value ("short", ...).

        Returns:
            The TTL in seconds.

        Raises:
            ValueError: If the name is not a known duration class.
        """
        return self.durations[CacheDuration(duration)]

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CacheConfig":
        """Build a configuration from environment variables.

        Recognised variables: REDIS_CACHE_ENABLED, REDIS_URL,
        REDIS_HOST, REDIS_PORT, REDIS_DB, REDIS_PASSWORD,
        REDIS_KEY_PREFIX, REDIS_DEFAULT_TTL, REDIS_SHORT_TTL,
        REDIS_MEDIUM_TTL, REDIS_LONG_TTL, REDIS_VERY_LONG_TTL and
        CACHE_MAX_SIZE.

        Caching is on unless REDIS_CACHE_ENABLED is "false" or "0".
        Without REDIS_URL or REDIS_HOST the in-memory backend is used.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Raises:
            ConfigurationError: If a numeric variable is not an integer.
        """
        env = os.environ if environ is None else environ

        enabled = env.get("REDIS_CACHE_ENABLED", "true").strip().lower() not in (
            "false",
            "0",
        )

        durations = {
            duration: _int_env(env, name, DEFAULT_DURATION_SECONDS[duration])
            for duration, name in _DURATION_ENV_VARS.items()
        }

        return cls(
            enabled=enabled,
            default_ttl=timedelta(seconds=_int_env(env, "REDIS_DEFAULT_TTL", 600)),
            key_prefix=env.get("REDIS_KEY_PREFIX", ""),
            redis_url=_redis_url(env),
            max_size=_int_env(env, "CACHE_MAX_SIZE", 1000),
            durations=durations,
        )


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _redis_url(env: Mapping[str, str]) -> str | None:
    url = env.get("REDIS_URL")
    if url:
        return url

    host = env.get("REDIS_HOST")
    if not host:
        return None

    port = _int_env(env, "REDIS_PORT", 6379)
    db = _int_env(env, "REDIS_DB", 0)
    password = env.get("REDIS_PASSWORD")
    auth = f":{password}@" if password else ""
    return f"redis://{auth}{host}:{port}/{db}"
