"""Exception hierarchy for cacheaside.

Only the cache layer raises these. Errors from fetchers and mutations
are never wrapped and always reach the caller unchanged.
"""


class CacheError(Exception):
    """Base class for all cache-layer errors."""


class StoreUnavailableError(CacheError):
    """Raised by a backend when the external store cannot be reached.

    Covers connection failures, timeouts and protocol errors. The
    CacheStore absorbs it and reports a miss or a no-op instead.
    """

    def __init__(self, operation: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        self.cause = cause
        message = f"Cache store unavailable during {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class SerializationError(CacheError):
    """Raised when serialization or deserialization fails."""


class ConfigurationError(CacheError, ValueError):
    """Raised when cache configuration values cannot be parsed."""
