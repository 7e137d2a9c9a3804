"""Hashing helpers for keys derived from call arguments."""

import hashlib
import json
from collections.abc import Mapping
from typing import Any

DIGEST_LENGTH = 16


def hash_value(value: Any) -> str:
    """Deterministic short digest of a JSON-like value.

    Dict ordering does not affect the result. Values json cannot encode
    are hashed through str().
    """
    normalized = json.dumps(value, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.sha256(normalized.encode()).hexdigest()[:DIGEST_LENGTH]


def hash_arguments(args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> str | None:
    """Digest of a call's arguments, or None for a call without any."""
    if not args and not kwargs:
        return None
    return hash_value({"args": list(args), "kwargs": dict(kwargs)})
