"""Cache decorators for async functions.

The service or invalidator is passed explicitly, so tests can hand in
one built on an in-memory or null store.

Example:
    service = CacheService.from_config(CacheConfig.from_env())
    invalidator = CacheInvalidator(service.store)

    @cached(service, key="user:{user_id}", duration=CacheDuration.LONG)
    async def get_user(user_id: str) -> dict:
        return await db.get_user(user_id)

    @invalidates(invalidator, keys=["user:{user_id}"], patterns=["users:list:*"])
    async def update_user(user_id: str, data: dict) -> dict:
        return await db.update_user(user_id, data)
"""

import functools
import inspect
import re
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from cacheaside.core.entities.cache_duration import CacheDuration
from cacheaside.core.entities.cache_key import build_key
from cacheaside.core.services.cache_service import CacheService
from cacheaside.core.services.invalidation import CacheInvalidator
from cacheaside.utils.hashing import hash_arguments

F = TypeVar("F", bound=Callable[..., Any])

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def cached(
    service: CacheService,
    key: str | Callable[..., str] | None = None,
    duration: CacheDuration | str = CacheDuration.MEDIUM,
    refresh_arg: str | None = None,
) -> Callable[[F], F]:
    """Decorator for read-through caching of an async function.

    Args:
        service: The cache service to read and populate.
        key: Cache key. A string supports {arg_name} interpolation; a
            callable receives the call arguments and returns the key.
            Defaults to the function's qualified name plus a hash of
            its arguments.
        duration: Duration class for the cached result.
        refresh_arg: Name of a keyword argument that, when true, forces
            a refresh. It is removed before the function is called.

    Returns:
        Decorated function.

    Example:
        @cached(service, key="permissions:all", refresh_arg="refresh")
        async def list_permissions() -> list[dict]:
            return await db.list_permissions()

        await list_permissions(refresh=True)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            refresh = bool(kwargs.pop(refresh_arg, False)) if refresh_arg else False
            cache_key = _build_cache_key(func, args, kwargs, key)
            return await service.fetch(
                lambda: func(*args, **kwargs),
                cache_key,
                duration,
                refresh=refresh,
            )

        return wrapper  # type: ignore

    return decorator


def invalidates(
    invalidator: CacheInvalidator,
    keys: Iterable[str] = (),
    patterns: Iterable[str] = (),
) -> Callable[[F], F]:
    """Decorator for invalidating cache entries after a mutation.

    Executes the decorated function first. If it raises, the error
    propagates and nothing is invalidated. Otherwise the interpolated
    keys and patterns are deleted; invalidation failures are logged by
    the invalidator and never reach the caller.

    Args:
        invalidator: The invalidator to delete entries with.
        keys: Exact keys. Support {arg_name} interpolation.
        patterns: Glob patterns. Support {arg_name} interpolation.
    """
    key_templates = tuple(keys)
    pattern_templates = tuple(patterns)

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            result = await func(*args, **kwargs)

            arguments = _bound_arguments(func, args, kwargs)
            await invalidator.invalidate(
                keys=[_interpolate_string(t, arguments) for t in key_templates],
                patterns=[_interpolate_string(t, arguments) for t in pattern_templates],
            )

            return result

        return wrapper  # type: ignore

    return decorator


def _build_cache_key(
    func: Callable[..., Any],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
    custom_key: str | Callable[..., str] | None,
) -> str:
    if custom_key is not None:
        if callable(custom_key):
            return custom_key(*args, **kwargs)
        return _interpolate_string(custom_key, _bound_arguments(func, args, kwargs))

    return build_key("func", f"{func.__module__}.{func.__qualname__}", hash_arguments(args, kwargs))


def _bound_arguments(
    func: Callable[..., Any],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> dict[str, Any]:
    """Map parameter names to values, positional arguments included."""
    try:
        bound = inspect.signature(func).bind_partial(*args, **kwargs)
    except TypeError:
        return dict(kwargs)
    bound.apply_defaults()
    return dict(bound.arguments)


def _interpolate_string(template: str, arguments: dict[str, Any]) -> str:
    """Interpolate {arg_name} placeholders; unknown names are kept as is."""

    def replacer(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in arguments:
            return str(arguments[name])
        return match.group(0)

    return _PLACEHOLDER.sub(replacer, template)
