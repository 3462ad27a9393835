import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import Client

from worklog.auth.jwt import JWTManager


@pytest.fixture(autouse=True)
def clear_django_cache():
    # LocMem entries survive database rollbacks.
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    def _make(email="alice@example.com", password="secret-pass-1", **extra):
        extra.setdefault("first_name", "Alice")
        extra.setdefault("last_name", "Martin")
        return get_user_model().objects.create_user(
            username=email, email=email, password=password, **extra
        )

    return _make


@pytest.fixture
def api_client():
    def _client(user=None):
        if user is None:
            return Client()
        token = JWTManager.generate_token(user)["token"]
        return Client(HTTP_AUTHORIZATION=f"Bearer {token}")

    return _client
