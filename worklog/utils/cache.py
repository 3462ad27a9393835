"""
Cache key utilities for the worklog application.

Keys are namespaced with ``worklog:`` so they never collide with other
applications sharing the same cache backend.
"""

import hashlib
import json
from typing import Any, Optional

KEY_NAMESPACE = "worklog"


def make_cache_key(prefix: str, *components: str) -> str:
    """
    Generate a cache key from prefix and components.

    Examples:
        >>> make_cache_key("api", "abc123")
        "worklog:api:abc123"
    """
    parts = [p for p in components if p]
    if parts:
        return f"{KEY_NAMESPACE}:{prefix}:{':'.join(parts)}"
    return f"{KEY_NAMESPACE}:{prefix}"


def hash_payload(payload: Any) -> str:
    """SHA-256 hex digest of a stable JSON serialization of ``payload``."""
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


def get_user_cache_key(user: Any) -> str:
    """
    Return the cache key component identifying the requesting user.

    Anonymous or missing users map to ``"guest"``.
    """
    if user is None:
        return "guest"
    if hasattr(user, "is_authenticated") and not user.is_authenticated:
        return "guest"
    identifier: Optional[Any] = getattr(user, "pk", None) or getattr(user, "id", None)
    return str(identifier) if identifier is not None else "guest"
