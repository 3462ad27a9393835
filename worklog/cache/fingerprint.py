"""
Request fingerprints for the response cache.

Two requests share a cache entry only when their full URL, method, user,
filters, pagination, sort and include parameters are identical.
"""

from typing import Any, Mapping, Optional

from ..filters.base import extract_filters
from ..utils.cache import get_user_cache_key, hash_payload, make_cache_key

FINGERPRINT_PARAMS = ("page", "per_page", "sort", "include")


def fingerprint_payload(
    url: str, method: str, user: Any, params: Mapping[str, Any]
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "url": url,
        "method": method.upper(),
        "user_id": get_user_cache_key(user),
        "filters": extract_filters(params) or None,
    }
    for name in FINGERPRINT_PARAMS:
        payload[name] = params.get(name)
    return payload


def build_fingerprint(
    url: str,
    method: str,
    user: Any,
    params: Mapping[str, Any],
    prefix: str = "api",
) -> str:
    return make_cache_key(prefix, hash_payload(fingerprint_payload(url, method, user, params)))


def request_fingerprint(request, prefix: str = "api", method: Optional[str] = None) -> str:
    """
    Compute the cache key for ``request``.

    ``method`` overrides the request method, which lets write handlers compute
    the key of the equivalent GET request.
    """
    return build_fingerprint(
        request.build_absolute_uri(),
        method or request.method,
        getattr(request, "user", None),
        request.GET,
        prefix=prefix,
    )
