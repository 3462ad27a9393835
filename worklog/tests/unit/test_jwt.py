"""
Unit tests for JWTManager.
"""

from datetime import timedelta
from types import SimpleNamespace

import jwt
import pytest
from django.test import override_settings
from django.utils import timezone

from worklog.auth.jwt import JWTManager

pytestmark = pytest.mark.unit


@pytest.fixture
def user():
    return SimpleNamespace(pk=7, email="alice@example.com")


def test_generated_token_verifies(user):
    token_data = JWTManager.generate_token(user)
    payload = JWTManager.verify_token(token_data["token"], expected_type="access")

    assert token_data["token_type"] == "Bearer"
    assert payload["user_id"] == 7
    assert payload["email"] == "alice@example.com"
    assert payload["jti"]


def test_wrong_type_is_refused(user):
    token = JWTManager.generate_token(user)["token"]
    assert JWTManager.verify_token(token, expected_type="refresh") is None


def test_garbage_and_expired_tokens_are_refused():
    assert JWTManager.verify_token("not-a-token") is None

    expired = jwt.encode(
        {"user_id": 1, "type": "access", "exp": timezone.now() - timedelta(minutes=1)},
        JWTManager.get_jwt_secret(),
        algorithm="HS256",
    )
    assert JWTManager.verify_token(expired) is None


def test_revoked_token_is_refused(user):
    token = JWTManager.generate_token(user)["token"]
    payload = JWTManager.verify_token(token)

    JWTManager.revoke_token(payload)

    assert JWTManager.verify_token(token) is None


@override_settings(JWT_ACCESS_TOKEN_LIFETIME=timedelta(hours=2))
def test_lifetime_accepts_timedelta():
    assert JWTManager.get_jwt_expiration() == 7200
