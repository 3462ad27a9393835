"""
Bearer token authentication middleware.
"""

import logging
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.http import HttpRequest, HttpResponse
from django.utils.deprecation import MiddlewareMixin

from .jwt import JWTManager

logger = logging.getLogger(__name__)


class JWTAuthenticationMiddleware(MiddlewareMixin):
    """
    Resolve ``request.user`` from an ``Authorization: Bearer <token>`` header.

    Requests without a valid token keep an anonymous user; views decide
    whether authentication is required.
    """

    def __init__(self, get_response=None):
        super().__init__(get_response)
        self.header_prefix = getattr(settings, "JWT_AUTH_HEADER_PREFIX", "Bearer")

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        request.jwt_payload = None
        token = self._extract_token(request)
        if not token:
            if not hasattr(request, "user"):
                request.user = AnonymousUser()
            return None

        payload = JWTManager.verify_token(token, expected_type="access")
        user = self._resolve_user(payload) if payload else None
        if user is None:
            request.user = AnonymousUser()
            return None

        request.user = user
        request.jwt_payload = payload
        return None

    def _extract_token(self, request: HttpRequest) -> Optional[str]:
        header = request.META.get("HTTP_AUTHORIZATION", "")
        if not header:
            return None
        parts = header.split(" ", 1)
        if len(parts) != 2 or parts[0] != self.header_prefix or not parts[1].strip():
            return None
        return parts[1].strip()

    def _resolve_user(self, payload: dict):
        user_id = payload.get("user_id")
        if not user_id:
            return None
        user = get_user_model().objects.filter(pk=user_id, is_active=True).first()
        if user is None:
            logger.warning("Token for unknown or inactive user %s", user_id)
        return user
