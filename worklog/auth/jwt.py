"""
JWT token management for API authentication.

Access tokens are HS256 signed with ``JWT_SECRET_KEY`` (falling back to
``SECRET_KEY``). Logging out revokes the token's ``jti`` in the cache until
the token would have expired anyway.
"""

import logging
import uuid
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Optional

import jwt
from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

from ..defaults import get_section

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractUser

logger = logging.getLogger(__name__)


class JWTManager:
    """
    Manager for JWT token operations.

    Example:
        token_data = JWTManager.generate_token(user)
        payload = JWTManager.verify_token(token_data["token"], expected_type="access")
        if payload:
            user_id = payload["user_id"]
    """

    @staticmethod
    def get_jwt_secret() -> str:
        return getattr(settings, "JWT_SECRET_KEY", settings.SECRET_KEY)

    @staticmethod
    def get_jwt_expiration() -> int:
        """
        Access token lifetime in seconds.

        ``JWT_ACCESS_TOKEN_LIFETIME`` may be an int or a ``timedelta``; 0 or a
        negative value issues non-expiring tokens.
        """
        lifetime = getattr(settings, "JWT_ACCESS_TOKEN_LIFETIME", 3600 * 24)
        if isinstance(lifetime, timedelta):
            return int(lifetime.total_seconds())
        return int(lifetime)

    @staticmethod
    def _revocation_key(token_id: str) -> str:
        prefix = get_section("auth").get("revocation_cache_prefix", "worklog:jwt:revoked")
        return f"{prefix}:{token_id}"

    @classmethod
    def generate_token(cls, user: "AbstractUser") -> dict[str, Any]:
        """
        Generate an access token for ``user``.

        Returns:
            A dictionary with ``token``, ``token_type`` and ``expires_at``.
        """
        now = timezone.now()
        lifetime = cls.get_jwt_expiration()
        expiration = None if lifetime <= 0 else now + timedelta(seconds=lifetime)

        payload = {
            "user_id": user.pk,
            "email": getattr(user, "email", ""),
            "iat": now,
            "type": "access",
            "jti": uuid.uuid4().hex,
        }
        if expiration is not None:
            payload["exp"] = expiration

        token = jwt.encode(payload, cls.get_jwt_secret(), algorithm="HS256")
        return {"token": token, "token_type": "Bearer", "expires_at": expiration}

    @classmethod
    def verify_token(
        cls, token: str, expected_type: Optional[str] = None
    ) -> Optional[dict[str, Any]]:
        """
        Verify and decode a JWT token.

        Returns:
            The decoded payload, or None if the token is invalid, expired,
            revoked or of the wrong type.
        """
        try:
            payload = jwt.decode(token, cls.get_jwt_secret(), algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            logger.warning("JWT token expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning("Invalid JWT token: %s", e)
            return None

        if expected_type and payload.get("type") != expected_type:
            logger.warning(
                "JWT token refused: expected type '%s', got '%s'",
                expected_type,
                payload.get("type"),
            )
            return None
        token_id = payload.get("jti")
        if token_id and cache.get(cls._revocation_key(token_id)):
            logger.info("JWT token %s has been revoked", token_id)
            return None
        return payload

    @classmethod
    def revoke_token(cls, payload: dict[str, Any]) -> None:
        """Revoke a decoded token until its natural expiry."""
        token_id = payload.get("jti")
        if not token_id:
            return
        ttl = None
        exp = payload.get("exp")
        if exp:
            ttl = max(int(exp - timezone.now().timestamp()), 1)
        cache.set(cls._revocation_key(token_id), True, timeout=ttl)
