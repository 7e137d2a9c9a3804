"""Named cache lifetimes."""

from enum import Enum


class CacheDuration(str, Enum):
    """Duration class for cached values.

    Call sites pick a class, never a number of seconds. The mapping to
    seconds lives in CacheConfig.durations so cache lifetime policy is
    set in one place.
    """

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    VERY_LONG = "very_long"


DEFAULT_DURATION_SECONDS: dict[CacheDuration, int] = {
    CacheDuration.SHORT: 5 * 60,
    CacheDuration.MEDIUM: 15 * 60,
    CacheDuration.LONG: 60 * 60,
    CacheDuration.VERY_LONG: 24 * 60 * 60,
}
