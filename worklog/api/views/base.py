"""
Base API view for the worklog REST endpoints.
"""

import json
import logging
import traceback
from typing import Any, Callable

from django.conf import settings
from django.core.paginator import EmptyPage, Paginator
from django.http import Http404, HttpRequest, HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from ...cache.response_cache import ResponseCache
from ...core.exceptions import (
    AccessDeniedError,
    AuthenticationRequired,
    MethodNotAllowedError,
    RequestValidationError,
    ResourceNotFoundError,
    WorklogAPIError,
)
from ...core.observability import report_exception
from ...core.settings import PaginationSettings

logger = logging.getLogger(__name__)


def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


@method_decorator(csrf_exempt, name="dispatch")
class BaseAPIView(View):
    """Base class for API views with common functionality."""

    auth_required = True
    _json_body_cache_attr = "_worklog_json_body_cache"
    _json_body_cache_set_attr = "_worklog_json_body_cache_set"

    def dispatch(self, request: HttpRequest, *args, **kwargs):
        """Authenticate and render ``WorklogAPIError`` as JSON."""
        try:
            if self.auth_required and request.method != "OPTIONS":
                self._authenticate_request(request)
            return super().dispatch(request, *args, **kwargs)
        except WorklogAPIError as exc:
            if exc.status_code >= 500:
                logger.error("API error on %s %s: %s", request.method, request.path, exc)
            return self.error_response(exc)
        except Http404:
            return self.error_response(
                WorklogAPIError(
                    "Resource not found", error_code="RESOURCE_NOT_FOUND", status_code=404
                )
            )
        except Exception as exc:
            return self.server_error_response(request, exc)

    def _authenticate_request(self, request: HttpRequest) -> None:
        user = getattr(request, "user", None)
        if not user or not getattr(user, "is_authenticated", False):
            raise AuthenticationRequired()

    def http_method_not_allowed(self, request, *args, **kwargs):
        logger.warning(
            "Method Not Allowed (%s): %s", request.method, request.path
        )
        raise MethodNotAllowedError(f"The {request.method} method is not supported for this route.")

    def options(self, request: HttpRequest, *args, **kwargs):
        """Handle preflight requests."""
        response = HttpResponse(status=200)
        response["Allow"] = ", ".join(self._allowed_methods())
        return response

    # ------------------------------------------------------------------ #
    # Responses
    # ------------------------------------------------------------------ #
    def json_response(self, data: Any, status: int = 200) -> JsonResponse:
        """Create a JSON response."""
        return JsonResponse(data, status=status, safe=False)

    def no_content(self) -> HttpResponse:
        return HttpResponse(status=204)

    def error_response(self, error: WorklogAPIError) -> JsonResponse:
        """Create an error response."""
        return JsonResponse(error.to_dict(), status=error.status_code)

    def server_error_response(self, request: HttpRequest, exc: Exception) -> JsonResponse:
        logger.error(
            "Unhandled error on %s %s: %s", request.method, request.path, exc, exc_info=True
        )
        report_exception(exc, component="api", view=self.__class__.__name__)

        payload: dict[str, Any] = {
            "status": "error",
            "message": "An unexpected error occurred",
            "error_code": "SERVER_ERROR",
        }
        if getattr(settings, "DEBUG", False):
            frames = traceback.extract_tb(exc.__traceback__)
            last = frames[-1] if frames else None
            payload["details"] = {
                "exception": exc.__class__.__name__,
                "file": last.filename if last else None,
                "line": last.lineno if last else None,
            }
        return JsonResponse(payload, status=500)

    # ------------------------------------------------------------------ #
    # Request helpers
    # ------------------------------------------------------------------ #
    def parse_json_body(self, request: HttpRequest) -> dict[str, Any]:
        """Parse JSON body; an empty body yields ``{}``."""
        if getattr(request, self._json_body_cache_set_attr, False):
            return getattr(request, self._json_body_cache_attr)
        parsed_body: Any = {}
        if request.body:
            try:
                parsed_body = json.loads(request.body.decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.warning("Error parsing JSON body: %s", e)
                raise RequestValidationError(
                    "Malformed JSON body", errors={"body": ["The request body must be valid JSON."]}
                )
        if not isinstance(parsed_body, dict):
            raise RequestValidationError(
                errors={"body": ["The request body must be a JSON object."]}
            )
        setattr(request, self._json_body_cache_attr, parsed_body)
        setattr(request, self._json_body_cache_set_attr, True)
        return parsed_body

    def validate(self, form) -> dict[str, Any]:
        """Return the submitted cleaned data or raise ``RequestValidationError``."""
        if not form.is_valid():
            raise RequestValidationError(errors=form.error_dict())
        return form.submitted

    def get_object_or_raise(self, kind: str, model, pk, queryset=None):
        queryset = queryset if queryset is not None else model._default_manager.all()
        obj = queryset.filter(pk=pk).first()
        if obj is None:
            raise ResourceNotFoundError(kind, pk)
        return obj

    def _require_admin(self, request: HttpRequest) -> None:
        """Ensure the request is authorized for management actions."""
        user = getattr(request, "user", None)
        if not user or not getattr(user, "is_authenticated", False):
            raise AuthenticationRequired()
        if getattr(user, "is_superuser", False) or getattr(user, "is_staff", False):
            return
        raise AccessDeniedError("Admin permissions required")

    def paginate(
        self, request: HttpRequest, queryset, serializer: Callable[[list], list]
    ) -> dict[str, Any]:
        """Paginate ``queryset`` into a ``{data, meta, links}`` envelope."""
        page_settings = PaginationSettings.from_settings()
        per_page = min(
            _positive_int(request.GET.get("per_page"), page_settings.default_per_page),
            page_settings.max_per_page,
        )
        page_number = _positive_int(request.GET.get("page"), 1)

        paginator = Paginator(queryset, per_page)
        try:
            items = list(paginator.page(page_number).object_list)
        except EmptyPage:
            items = []
        offset = (page_number - 1) * per_page
        last_page = paginator.num_pages

        logger.info(
            "Pagination for %s: total=%s per_page=%s current_page=%s last_page=%s",
            request.path,
            paginator.count,
            per_page,
            page_number,
            last_page,
        )
        return {
            "data": serializer(items),
            "meta": {
                "current_page": page_number,
                "last_page": last_page,
                "per_page": per_page,
                "total": paginator.count,
                "from": offset + 1 if items else None,
                "to": offset + len(items) if items else None,
            },
            "links": {
                "first": self._page_url(request, 1),
                "last": self._page_url(request, last_page),
                "prev": self._page_url(request, page_number - 1) if page_number > 1 else None,
                "next": (
                    self._page_url(request, page_number + 1)
                    if page_number < last_page
                    else None
                ),
            },
        }

    def _page_url(self, request: HttpRequest, page: int) -> str:
        params = request.GET.copy()
        params["page"] = str(page)
        return f"{request.build_absolute_uri(request.path)}?{params.urlencode()}"

    # ------------------------------------------------------------------ #
    # Cache invalidation
    # ------------------------------------------------------------------ #
    def invalidate(self, request: HttpRequest, *routes: str) -> None:
        """
        Drop cached reads made stale by a write.

        Clears the entry of the equivalent GET of ``request`` and every tracked
        entry whose path contains one of ``routes``. Failures are logged and
        reported; the write has already succeeded.
        """
        try:
            cache = ResponseCache()
            if not cache.settings.enabled:
                return
            cache.invalidate_request(request)
            for route in routes:
                cache.clear_route(route)
        except Exception as exc:
            logger.error(
                "Cache invalidation failed for %s %s: %s",
                request.method,
                request.path,
                exc,
                exc_info=True,
            )
            report_exception(exc, component="response_cache", stage="invalidate")
