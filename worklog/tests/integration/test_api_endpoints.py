"""
Integration tests for the REST endpoints.
"""

import json
from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.test import Client

from worklog.models import (
    Attribute,
    AttributeType,
    AttributeValue,
    OwnerType,
    Project,
    ProjectStatus,
    Timesheet,
)

pytestmark = [pytest.mark.integration, pytest.mark.django_db]


def send(client, method, url, payload):
    return getattr(client, method)(url, data=json.dumps(payload), content_type="application/json")


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def client(api_client, user):
    return api_client(user)


@pytest.fixture
def date_attributes():
    return (
        Attribute.objects.create(name="Start Date", type=AttributeType.DATE),
        Attribute.objects.create(name="End Date", type=AttributeType.DATE),
    )


@pytest.fixture
def priority():
    return Attribute.objects.create(
        name="Priority", type=AttributeType.SELECT, options=["High", "Medium", "Low"]
    )


class TestAuthFlow:
    def test_register_login_logout(self, api_client):
        anonymous = api_client()
        registered = send(
            anonymous,
            "post",
            "/api/register",
            {
                "first_name": "Nora",
                "last_name": "Blake",
                "email": "nora@example.com",
                "password": "long-password",
            },
        )
        assert registered.status_code == 201
        body = registered.json()
        assert body["message"] == "Registration successful."
        assert body["user"]["email"] == "nora@example.com"
        assert body["token"]["token_type"] == "Bearer"

        login = send(
            anonymous, "post", "/api/login", {"email": "nora@example.com", "password": "long-password"}
        )
        assert login.status_code == 200
        token = login.json()["access_token"]

        authed = Client(HTTP_AUTHORIZATION=f"Bearer {token}")
        assert authed.get("/api/user").json()["first_name"] == "Nora"

        assert authed.post("/api/logout").json() == {"message": "Successfully logged out"}
        assert authed.get("/api/user").status_code == 401

    def test_bad_credentials(self, api_client, user):
        response = send(
            api_client(), "post", "/api/login", {"email": user.email, "password": "wrong-pass"}
        )
        assert response.status_code == 422
        assert response.json()["errors"] == {"email": ["The provided credentials are incorrect."]}

    def test_duplicate_email_is_rejected(self, api_client, user):
        response = send(
            api_client(),
            "post",
            "/api/register",
            {"first_name": "A", "last_name": "B", "email": user.email, "password": "long-password"},
        )
        assert response.status_code == 422
        assert response.json()["errors"]["email"] == ["The email has already been taken."]

    def test_resources_require_a_token(self, api_client):
        response = api_client().get("/api/projects")
        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHENTICATED"


class TestErrorEnvelope:
    def test_missing_project(self, client):
        response = client.get("/api/projects/99999")
        assert response.status_code == 404
        assert response.json() == {
            "status": "error",
            "message": "Project with ID 99999 not found",
            "error_code": "PROJECT_NOT_FOUND",
        }

    def test_missing_timesheet(self, client):
        response = client.delete("/api/timesheets/99999")
        assert response.json()["error_code"] == "TIMESHEET_NOT_FOUND"

    def test_invalid_filters(self, client):
        response = client.get("/api/projects", {"filters[bogus]": "x"})
        assert response.status_code == 422
        assert response.json() == {
            "status": "error",
            "message": "Invalid filter parameters",
            "error_code": "INVALID_FILTERS",
            "errors": {"bogus": "Unknown filter field: bogus"},
        }

    def test_malformed_json(self, client):
        response = client.post("/api/projects", data="{nope", content_type="application/json")
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_FAILED"

    def test_method_not_allowed(self, client):
        response = client.delete("/api/projects")
        assert response.status_code == 405
        assert response.json()["error_code"] == "METHOD_NOT_ALLOWED"


class TestProjects:
    def test_create_with_attributes(self, client, user, priority, date_attributes):
        start, end = date_attributes
        response = send(
            client,
            "post",
            "/api/projects",
            {
                "name": "<b>Website</b> redesign",
                "status": "active",
                "attributes": [
                    {"attribute_id": priority.pk, "value": "High"},
                    {"attribute_id": start.pk, "value": "2024-01-01"},
                    {"attribute_id": end.pk, "value": "2024-06-30"},
                ],
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Website redesign"
        assert body["description"] is None
        assert {a["name"]: a["value"] for a in body["attributes"]} == {
            "Priority": "High",
            "Start Date": "2024-01-01",
            "End Date": "2024-06-30",
        }
        project = Project.objects.get(pk=body["id"])
        assert list(project.users.all()) == [user]

    def test_validation_messages(self, client, priority, date_attributes):
        start, end = date_attributes
        response = send(
            client,
            "post",
            "/api/projects",
            {
                "status": "archived",
                "attributes": [
                    {"attribute_id": priority.pk, "value": "Urgent"},
                    {"attribute_id": start.pk, "value": "2024-06-01"},
                    {"attribute_id": end.pk, "value": "2024-05-01"},
                    {"attribute_id": 999999, "value": "x"},
                ],
            },
        )

        assert response.status_code == 422
        errors = response.json()["errors"]
        assert errors["name"] == ["The project name is required."]
        assert errors["status"] == ["The project status must be one of: active, completed, on-hold."]
        assert errors["attributes.0.value"] == ["The selected value is not a valid option."]
        assert errors["attributes.2.value"] == ["The end date must be after the start date."]
        assert errors["attributes.3.attribute_id"] == [
            "One or more selected attributes do not exist."
        ]

    def test_end_date_checked_against_stored_start_date(self, client, date_attributes):
        start, end = date_attributes
        created = send(
            client,
            "post",
            "/api/projects",
            {
                "name": "Alpha",
                "status": "active",
                "attributes": [{"attribute_id": start.pk, "value": "2024-06-01"}],
            },
        ).json()

        response = send(
            client,
            "patch",
            f"/api/projects/{created['id']}",
            {"attributes": [{"attribute_id": end.pk, "value": "2024-01-01"}]},
        )
        assert response.status_code == 422
        assert "attributes.0.value" in response.json()["errors"]

    def test_update_replaces_attribute_values(self, client, priority, date_attributes):
        start, _ = date_attributes
        created = send(
            client,
            "post",
            "/api/projects",
            {
                "name": "Alpha",
                "status": "active",
                "attributes": [{"attribute_id": priority.pk, "value": "Low"}],
            },
        ).json()

        response = send(
            client,
            "put",
            f"/api/projects/{created['id']}",
            {"status": "on-hold", "attributes": [{"attribute_id": start.pk, "value": "2024-02-02"}]},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Alpha"
        assert body["status"] == "on-hold"
        assert [a["name"] for a in body["attributes"]] == ["Start Date"]

    def test_failed_value_replacement_rolls_back_update(self, client, priority):
        created = send(
            client,
            "post",
            "/api/projects",
            {
                "name": "Alpha",
                "status": "active",
                "attributes": [{"attribute_id": priority.pk, "value": "Low"}],
            },
        ).json()

        with patch(
            "worklog.api.views.projects.replace_values", side_effect=RuntimeError("db gone")
        ):
            response = send(
                client,
                "put",
                f"/api/projects/{created['id']}",
                {
                    "name": "Renamed",
                    "attributes": [{"attribute_id": priority.pk, "value": "High"}],
                },
            )

        assert response.status_code == 500
        assert response.json()["error_code"] == "SERVER_ERROR"
        assert Project.objects.get(pk=created["id"]).name == "Alpha"
        stored = AttributeValue.objects.get(owner_type=OwnerType.PROJECT, owner_id=created["id"])
        assert stored.value == "Low"

    def test_delete_removes_attribute_values(self, client, priority):
        created = send(
            client,
            "post",
            "/api/projects",
            {
                "name": "Alpha",
                "status": "active",
                "attributes": [{"attribute_id": priority.pk, "value": "Medium"}],
            },
        ).json()

        response = client.delete(f"/api/projects/{created['id']}")

        assert response.status_code == 204
        assert not Project.objects.filter(pk=created["id"]).exists()
        assert not AttributeValue.objects.filter(
            owner_type=OwnerType.PROJECT, owner_id=created["id"]
        ).exists()

    def test_pagination_envelope(self, client):
        for index in range(12):
            Project.objects.create(name=f"Project {index}", status=ProjectStatus.ACTIVE)

        body = client.get("/api/projects", {"per_page": 5, "page": 3}).json()

        assert len(body["data"]) == 2
        assert body["meta"] == {
            "current_page": 3,
            "last_page": 3,
            "per_page": 5,
            "total": 12,
            "from": 11,
            "to": 12,
        }
        assert body["links"]["next"] is None
        assert "page=2" in body["links"]["prev"]

    def test_default_page_size(self, client):
        for index in range(11):
            Project.objects.create(name=f"Project {index}", status=ProjectStatus.ACTIVE)

        body = client.get("/api/projects").json()
        assert body["meta"]["per_page"] == 10
        assert len(body["data"]) == 10
        assert body["data"][0]["name"] == "Project 10"

    def test_filtered_listing(self, client, priority):
        for name, value in (("Alpha", "High"), ("Beta", "Low")):
            send(
                client,
                "post",
                "/api/projects",
                {
                    "name": name,
                    "status": "active",
                    "attributes": [{"attribute_id": priority.pk, "value": value}],
                },
            )

        body = client.get("/api/projects", {"filters[Priority]": "high"}).json()
        assert [p["name"] for p in body["data"]] == ["Alpha"]


class TestTimesheets:
    @pytest.fixture
    def project(self, user):
        project = Project.objects.create(name="Alpha", status=ProjectStatus.ACTIVE)
        project.users.add(user)
        return project

    def test_create_and_read(self, client, user, project):
        response = send(
            client,
            "post",
            "/api/timesheets",
            {
                "date": "2024-02-01",
                "hours": 7.5,
                "task_name": "Code review",
                "project_id": project.pk,
                "user_id": user.pk,
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["hours"] == 7.5
        assert body["date"] == "2024-02-01"
        assert client.get(f"/api/timesheets/{body['id']}").json()["task_name"] == "Code review"

    def test_create_rules(self, client, make_user, user):
        other = make_user(email="bob@example.com")
        foreign_project = Project.objects.create(name="Beta", status=ProjectStatus.ACTIVE)

        response = send(
            client,
            "post",
            "/api/timesheets",
            {
                "date": "2024-02-01",
                "hours": 25,
                "task_name": "Overtime",
                "project_id": foreign_project.pk,
                "user_id": other.pk,
            },
        )

        errors = response.json()["errors"]
        assert response.status_code == 422
        assert errors["hours"] == ["The hours cannot exceed 24."]
        assert errors["project_id"] == [
            "You can only create timesheets for projects you are assigned to."
        ]
        assert errors["user_id"] == ["You can only create timesheets for yourself."]

    def test_other_users_timesheets_are_hidden(self, api_client, make_user, user, project):
        other = make_user(email="bob@example.com")
        project.users.add(other)
        theirs = Timesheet.objects.create(
            user=other, project=project, task_name="Planning", date=date(2024, 1, 5), hours=Decimal("3")
        )
        Timesheet.objects.create(
            user=user, project=project, task_name="Review", date=date(2024, 1, 6), hours=Decimal("2")
        )

        client = api_client(user)
        listing = client.get("/api/timesheets").json()
        assert [t["task_name"] for t in listing["data"]] == ["Review"]

        response = client.get(f"/api/timesheets/{theirs.pk}")
        assert response.status_code == 403
        assert response.json()["error_code"] == "ACCESS_DENIED"

        response = client.delete(f"/api/timesheets/{theirs.pk}")
        assert response.status_code == 403
        assert Timesheet.objects.filter(pk=theirs.pk).exists()

    def test_partial_update(self, client, user, project):
        timesheet = Timesheet.objects.create(
            user=user, project=project, task_name="Review", date=date(2024, 1, 6), hours=Decimal("2")
        )

        response = send(client, "patch", f"/api/timesheets/{timesheet.pk}", {"hours": "4.25"})

        assert response.status_code == 200
        assert response.json()["hours"] == 4.25
        assert response.json()["task_name"] == "Review"


class TestAttributes:
    def test_list_is_not_paginated(self, client, priority):
        response = client.get("/api/attributes")
        assert response.status_code == 200
        assert [a["name"] for a in response.json()] == ["Priority"]

    def test_create_rules(self, client, priority):
        response = send(client, "post", "/api/attributes", {"name": "priority", "type": "select"})

        errors = response.json()["errors"]
        assert response.status_code == 422
        assert errors["name"] == ["This attribute name is already in use."]
        assert errors["options"] == ["Options are required when type is select."]

    def test_duplicate_options_and_bad_type(self, client):
        response = send(
            client, "post", "/api/attributes", {"name": "Size", "type": "enum", "options": ["S", "S"]}
        )
        errors = response.json()["errors"]
        assert errors["type"] == ["The attribute type must be one of: text, number, date, select."]
        assert errors["options"] == ["All options must be unique."]

    def test_update_keeps_own_name(self, client, priority):
        response = send(
            client,
            "put",
            f"/api/attributes/{priority.pk}",
            {"name": "Priority", "options": ["High", "Low"]},
        )
        assert response.status_code == 200
        assert response.json()["options"] == ["High", "Low"]

    def test_delete(self, client, priority):
        assert client.delete(f"/api/attributes/{priority.pk}").status_code == 204
        assert not Attribute.objects.exists()


class TestUsers:
    def test_crud(self, client, user):
        created = send(
            client,
            "post",
            "/api/users",
            {
                "first_name": "Bob",
                "last_name": "Stone",
                "email": "bob@example.com",
                "password": "long-password",
            },
        )
        assert created.status_code == 201
        bob_id = created.json()["id"]

        listing = client.get("/api/users").json()
        assert [u["email"] for u in listing["data"]] == ["bob@example.com", user.email]

        # Only staff or the account owner may modify a user.
        assert send(client, "patch", f"/api/users/{bob_id}", {"first_name": "X"}).status_code == 403

        updated = send(client, "patch", f"/api/users/{user.pk}", {"first_name": "Alicia"})
        assert updated.json()["first_name"] == "Alicia"

    def test_missing_user(self, client):
        response = client.get("/api/users/99999")
        assert response.json()["message"] == "User with ID 99999 not found"
