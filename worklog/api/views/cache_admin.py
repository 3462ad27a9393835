"""
Staff-only management of the API response cache.
"""

import logging

from ...cache.response_cache import ResponseCache
from ...core.exceptions import RequestValidationError
from .base import BaseAPIView

logger = logging.getLogger(__name__)


class CacheManagementAPIView(BaseAPIView):
    """
    POST actions:

    - ``clear_all``: drop every tracked entry.
    - ``clear_route``: drop entries whose path contains ``route``.
    - ``sweep``: drop entries older than ``max_age_days`` (default from settings).
    """

    def post(self, request):
        self._require_admin(request)
        data = self.parse_json_body(request)
        action = data.get("action")
        cache = ResponseCache()

        if action == "clear_all":
            cleared = cache.clear_all()
        elif action == "clear_route":
            route = data.get("route")
            if not isinstance(route, str) or not route.strip():
                raise RequestValidationError(errors={"route": ["The route field is required."]})
            cleared = cache.clear_route(route.strip())
        elif action == "sweep":
            max_age_days = data.get("max_age_days")
            if max_age_days is not None and (
                not isinstance(max_age_days, int) or max_age_days < 0
            ):
                raise RequestValidationError(
                    errors={"max_age_days": ["The max age must be a non-negative integer."]}
                )
            cleared = cache.sweep(max_age_days)
        else:
            raise RequestValidationError(
                errors={"action": ["The action must be one of: clear_all, clear_route, sweep."]}
            )

        logger.info(
            "Cache management action %s by user %s: cleared=%s", action, request.user.pk, cleared
        )
        return self.json_response({"status": "success", "action": action, "cleared": cleared})
