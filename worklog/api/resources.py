"""
JSON representations of the API resources.
"""

from typing import Any, Iterable, Optional

from ..models import Attribute, AttributeValue, OwnerType, Project, Timesheet
from ..services.attribute_values import values_by_owner


def _timestamp(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def attribute_resource(attribute: Attribute) -> dict[str, Any]:
    return {
        "id": attribute.pk,
        "name": attribute.name,
        "type": attribute.type,
        "options": list(attribute.options or []),
        "created_at": _timestamp(attribute.created_at),
        "updated_at": _timestamp(attribute.updated_at),
    }


def attribute_value_resource(value: AttributeValue) -> dict[str, Any]:
    return {
        "id": value.pk,
        "attribute_id": value.attribute_id,
        "name": value.attribute.name,
        "type": value.attribute.type,
        "value": value.value,
    }


def project_resource(
    project: Project, values: Optional[Iterable[AttributeValue]] = None
) -> dict[str, Any]:
    if values is None:
        values = project.attribute_values()
    return {
        "id": project.pk,
        "name": project.name,
        "description": project.description,
        "status": project.status,
        "attributes": [attribute_value_resource(v) for v in values],
        "created_at": _timestamp(project.created_at),
        "updated_at": _timestamp(project.updated_at),
    }


def project_collection(projects: list[Project]) -> list[dict[str, Any]]:
    """Serialize a page of projects with one query for all attribute values."""
    grouped = values_by_owner(OwnerType.PROJECT, [p.pk for p in projects])
    return [project_resource(p, grouped.get(p.pk, [])) for p in projects]


def timesheet_resource(timesheet: Timesheet) -> dict[str, Any]:
    return {
        "id": timesheet.pk,
        "project_id": timesheet.project_id,
        "user_id": timesheet.user_id,
        "date": timesheet.date.isoformat(),
        "hours": float(timesheet.hours),
        "task_name": timesheet.task_name,
        "created_at": _timestamp(timesheet.created_at),
        "updated_at": _timestamp(timesheet.updated_at),
    }


def user_resource(user) -> dict[str, Any]:
    return {
        "id": user.pk,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "created_at": _timestamp(getattr(user, "date_joined", None)),
    }
