"""
ResponseCacheMiddleware implementation.

Must be installed after ``JWTAuthenticationMiddleware`` so the requesting
user is part of the fingerprint.
"""

import logging
from typing import Optional

from django.http import HttpRequest, HttpResponse
from django.utils.deprecation import MiddlewareMixin

from ..core.observability import report_exception
from .response_cache import ResponseCache

logger = logging.getLogger(__name__)

_HIT_ATTR = "_worklog_cache_hit"
_SKIP_ATTR = "_worklog_cache_skip"


class ResponseCacheMiddleware(MiddlewareMixin):
    """
    Serve cached GET responses and store fresh 200 responses.

    Cache failures never fail the request: the error is logged and reported
    and the view runs uncached.
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        cache = ResponseCache()
        request._worklog_response_cache = cache
        if not cache.is_cacheable_request(request):
            setattr(request, _SKIP_ATTR, True)
            return None

        try:
            cached = cache.lookup(request)
        except Exception as exc:
            self._report(request, exc, "lookup")
            setattr(request, _SKIP_ATTR, True)
            return None

        if cached is None:
            return None
        setattr(request, _HIT_ATTR, True)
        cached[cache.settings.cache_header] = "HIT"
        return cached

    def process_response(self, request: HttpRequest, response: HttpResponse) -> HttpResponse:
        if getattr(request, _HIT_ATTR, False) or getattr(request, _SKIP_ATTR, False):
            return response

        cache = getattr(request, "_worklog_response_cache", None) or ResponseCache()
        try:
            if cache.store(request, response):
                response[cache.settings.cache_header] = "MISS"
        except Exception as exc:
            self._report(request, exc, "store")
        return response

    def _report(self, request: HttpRequest, exc: Exception, stage: str) -> None:
        logger.error(
            "Cache error during %s: path=%s error=%s", stage, request.path, exc, exc_info=True
        )
        report_exception(exc, component="response_cache", stage=stage)
