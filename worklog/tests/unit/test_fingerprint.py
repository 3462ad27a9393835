"""
Unit tests for response cache fingerprints.
"""

import pytest
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory

from worklog.cache.fingerprint import build_fingerprint, fingerprint_payload, request_fingerprint

pytestmark = pytest.mark.unit

URL = "http://testserver/api/projects"


class MockUser:
    is_authenticated = True

    def __init__(self, pk):
        self.pk = pk


def test_payload_fields():
    payload = fingerprint_payload(
        URL, "get", None, {"filters[status]": "active", "page": "2", "other": "x"}
    )
    assert payload == {
        "url": URL,
        "method": "GET",
        "user_id": "guest",
        "filters": {"status": "active"},
        "page": "2",
        "per_page": None,
        "sort": None,
        "include": None,
    }


def test_identical_requests_share_a_key():
    params = {"filters[status]": "active"}
    assert build_fingerprint(URL, "GET", MockUser(1), params) == build_fingerprint(
        URL, "GET", MockUser(1), dict(params)
    )


def test_key_depends_on_user_and_method():
    base = build_fingerprint(URL, "GET", MockUser(1), {})
    assert base != build_fingerprint(URL, "GET", MockUser(2), {})
    assert base != build_fingerprint(URL, "HEAD", MockUser(1), {})
    assert base.startswith("worklog:api:")


def test_request_fingerprint_can_target_the_get_equivalent():
    rf = RequestFactory()
    get_request = rf.get("/api/projects/3")
    put_request = rf.put("/api/projects/3")
    get_request.user = put_request.user = AnonymousUser()

    assert request_fingerprint(put_request, method="GET") == request_fingerprint(get_request)
    assert request_fingerprint(put_request) != request_fingerprint(get_request)
