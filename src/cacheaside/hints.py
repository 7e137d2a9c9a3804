"""Request-level cache hints.

Route handlers read these signals from the incoming request and pass
the result to CacheService.fetch.

Usage with FastAPI or Starlette:
    from cacheaside.hints import wants_refresh

    @app.get("/permissions")
    async def list_permissions(request: Request):
        return await cache_service.fetch(
            load_permissions,
            key=keys.permissions(),
            duration=CacheDuration.LONG,
            refresh=wants_refresh(request.query_params),
        )
"""

from collections.abc import Container

# Presence of this query parameter forces a refresh, whatever its value.
REFRESH_PARAM = "_refresh"


def wants_refresh(params: Container[str] | None) -> bool:
    """Return True if the request asked to bypass the cached copy.

    Args:
        params: Query parameters (any mapping or multi-dict), or None.
    """
    if params is None:
        return False
    return REFRESH_PARAM in params
