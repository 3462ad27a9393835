"""
Integration tests for the HTTP response cache and its invalidation paths.
"""

import json
from datetime import timedelta
from io import StringIO
from unittest.mock import MagicMock, PropertyMock, patch

import pytest
from django.core.cache import cache
from django.core.management import call_command
from django.test import override_settings
from django.utils import timezone

from worklog.cache.registry import CacheKeyRegistry
from worklog.cache.response_cache import ResponseCache
from worklog.cache.scheduler import CacheSweeper
from worklog.models import Project, ProjectStatus, TrackedCacheKey

pytestmark = [pytest.mark.integration, pytest.mark.django_db]


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def client(api_client, user):
    return api_client(user)


def test_identical_gets_are_served_from_cache(client):
    Project.objects.create(name="Alpha", status=ProjectStatus.ACTIVE)

    first = client.get("/api/projects")
    # Written straight to the database: the cached list must not see it.
    Project.objects.create(name="Beta", status=ProjectStatus.ACTIVE)
    second = client.get("/api/projects")

    assert first.status_code == 200
    assert first["X-Cache"] == "MISS"
    assert second["X-Cache"] == "HIT"
    assert second.content == first.content
    assert second["Content-Type"] == "application/json"
    assert TrackedCacheKey.objects.count() == 1


def test_entries_are_tracked_with_route_duration(client):
    client.get("/api/attributes")

    tracked = TrackedCacheKey.objects.get()
    assert tracked.path == "api/attributes"
    assert tracked.expires_at - tracked.created_at == timedelta(minutes=60)
    assert cache.get(tracked.key) is not None


def test_users_do_not_share_entries(api_client, user, make_user):
    other = make_user(email="bob@example.com")

    assert api_client(user).get("/api/projects")["X-Cache"] == "MISS"
    assert api_client(other).get("/api/projects")["X-Cache"] == "MISS"
    assert TrackedCacheKey.objects.count() == 2


def test_write_invalidates_list(client):
    client.get("/api/projects")

    response = client.post(
        "/api/projects",
        data=json.dumps({"name": "Gamma", "status": "active"}),
        content_type="application/json",
    )
    assert response.status_code == 201

    listing = client.get("/api/projects")
    assert listing["X-Cache"] == "MISS"
    assert [p["name"] for p in listing.json()["data"]] == ["Gamma"]


def test_update_invalidates_detail(client):
    project = Project.objects.create(name="Alpha", status=ProjectStatus.ACTIVE)
    url = f"/api/projects/{project.pk}"
    assert client.get(url).json()["name"] == "Alpha"

    client.put(url, data=json.dumps({"name": "Alpha v2"}), content_type="application/json")

    refreshed = client.get(url)
    assert refreshed["X-Cache"] == "MISS"
    assert refreshed.json()["name"] == "Alpha v2"


def test_errors_and_writes_are_not_cached(client):
    assert client.get("/api/projects/4242").status_code == 404
    client.post("/api/projects", data="{}", content_type="application/json")

    assert TrackedCacheKey.objects.count() == 0


@override_settings(WORKLOG_API_CACHE={"enabled": False})
def test_disabled_cache_stores_nothing(client):
    response = client.get("/api/projects")

    assert response.status_code == 200
    assert "X-Cache" not in response
    assert TrackedCacheKey.objects.count() == 0


def test_store_failure_does_not_fail_the_request(client):
    with patch.object(ResponseCache, "store", side_effect=RuntimeError("backend down")), patch(
        "worklog.cache.middleware.report_exception"
    ) as report:
        response = client.get("/api/projects")

    assert response.status_code == 200
    report.assert_called_once()


def test_lookup_failure_serves_the_view(client):
    with patch.object(ResponseCache, "lookup", side_effect=RuntimeError("backend down")), patch(
        "worklog.cache.middleware.report_exception"
    ) as report:
        response = client.get("/api/projects")

    assert response.status_code == 200
    assert response.json()["meta"]["total"] == 0
    assert "X-Cache" not in response
    assert TrackedCacheKey.objects.count() == 0
    report.assert_called_once()


def test_index_failure_stores_nothing(api_client, user, make_user):
    alice = api_client(user)
    bob = api_client(make_user(email="bob@example.com"))
    Project.objects.create(name="Alpha", status=ProjectStatus.ACTIVE)

    with patch.object(CacheKeyRegistry, "track", side_effect=RuntimeError("index down")), patch(
        "worklog.cache.middleware.report_exception"
    ):
        first = alice.get("/api/projects", {"page": 1})

    assert first.status_code == 200
    assert "X-Cache" not in first
    assert TrackedCacheKey.objects.count() == 0

    created = bob.post(
        "/api/projects",
        data=json.dumps({"name": "Beta", "status": "active"}),
        content_type="application/json",
    )
    assert created.status_code == 201

    second = alice.get("/api/projects", {"page": 1})
    assert second["X-Cache"] == "MISS"
    assert second.json()["meta"]["total"] == 2


def test_backend_failure_drops_the_index_row(client):
    backend = MagicMock()
    backend.get.return_value = None
    backend.set.side_effect = RuntimeError("backend down")

    with patch.object(
        ResponseCache, "backend", new_callable=PropertyMock, return_value=backend
    ), patch("worklog.cache.middleware.report_exception") as report:
        response = client.get("/api/projects")

    assert response.status_code == 200
    assert "X-Cache" not in response
    assert TrackedCacheKey.objects.count() == 0
    backend.delete.assert_called_once()
    report.assert_called_once()


class TestInvalidationOperations:
    @pytest.fixture
    def primed(self, client):
        client.get("/api/projects")
        client.get("/api/attributes")
        return ResponseCache()

    def test_clear_route_matches_path_substring(self, primed):
        assert primed.clear_route("api/projects") == 1
        assert list(TrackedCacheKey.objects.values_list("path", flat=True)) == ["api/attributes"]

    def test_clear_all(self, primed):
        keys = list(TrackedCacheKey.objects.values_list("key", flat=True))

        assert primed.clear_all() == 2
        assert TrackedCacheKey.objects.count() == 0
        assert all(cache.get(key) is None for key in keys)

    def test_sweep_removes_only_old_entries(self, primed):
        old = TrackedCacheKey.objects.get(path="api/projects")
        old.created_at = timezone.now() - timedelta(days=4)
        old.save()

        assert primed.sweep() == 1
        assert cache.get(old.key) is None
        assert list(TrackedCacheKey.objects.values_list("path", flat=True)) == ["api/attributes"]

    def test_sweeper_run_once(self, primed):
        TrackedCacheKey.objects.update(created_at=timezone.now() - timedelta(days=10))
        assert CacheSweeper(interval=3600).run_once() == 2

    def test_clear_command(self, primed):
        out = StringIO()
        call_command("clear_api_cache", route="api/attributes", stdout=out)
        assert "Cleared 1 cached responses for route 'api/attributes'." in out.getvalue()

        out = StringIO()
        call_command("clear_api_cache", stdout=out)
        assert "Cleared all API cache (1 entries)." in out.getvalue()

    def test_sweep_command(self, primed):
        out = StringIO()
        call_command("sweep_api_cache", max_age_days=0, stdout=out)
        assert "Removed 2 cached responses older than 0 days." in out.getvalue()
        assert TrackedCacheKey.objects.count() == 0


class TestCacheManagementEndpoint:
    def test_requires_staff(self, client):
        response = client.post(
            "/api/cache", data=json.dumps({"action": "clear_all"}), content_type="application/json"
        )
        assert response.status_code == 403
        assert response.json()["error_code"] == "ACCESS_DENIED"

    def test_staff_can_clear_by_route(self, api_client, make_user):
        admin = make_user(email="admin@example.com", is_staff=True)
        client = api_client(admin)
        client.get("/api/projects")
        client.get("/api/attributes")

        response = client.post(
            "/api/cache",
            data=json.dumps({"action": "clear_route", "route": "api/projects"}),
            content_type="application/json",
        )

        assert response.status_code == 200
        assert response.json() == {"status": "success", "action": "clear_route", "cleared": 1}

    def test_unknown_action(self, api_client, make_user):
        admin = make_user(email="admin@example.com", is_staff=True)
        response = api_client(admin).post(
            "/api/cache", data=json.dumps({"action": "explode"}), content_type="application/json"
        )
        assert response.status_code == 422
        assert "action" in response.json()["errors"]
