"""
Persistence of EAV values for attribute owners.

Values are replaced wholesale: an update deletes every stored value of the
owner and inserts the submitted set inside the caller's transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from django.db import transaction

from ..models import Attribute, AttributeType, AttributeValue, OwnerType
from ..utils.datetime_utils import format_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OwnerRef:
    """Tagged reference to an attribute owner."""

    owner_type: str
    owner_id: int

    @classmethod
    def for_project(cls, project) -> "OwnerRef":
        return cls(OwnerType.PROJECT, project.pk)

    @classmethod
    def for_user(cls, user) -> "OwnerRef":
        return cls(OwnerType.USER, user.pk)


def normalize_value(attribute: Attribute, value: Any) -> Any:
    """Store dates as ``YYYY-MM-DD`` and everything else as text."""
    if value is None:
        return None
    if attribute.type == AttributeType.DATE:
        return format_date(value) or str(value)
    return str(value)


def values_for(owner: OwnerRef):
    return AttributeValue.objects.filter(
        owner_type=owner.owner_type, owner_id=owner.owner_id
    ).select_related("attribute")


def values_by_owner(owner_type: str, owner_ids: Iterable[int]) -> dict[int, list[AttributeValue]]:
    """Fetch values for many owners in one query, grouped by owner id."""
    grouped: dict[int, list[AttributeValue]] = {}
    rows = AttributeValue.objects.filter(
        owner_type=owner_type, owner_id__in=list(owner_ids)
    ).select_related("attribute")
    for row in rows:
        grouped.setdefault(row.owner_id, []).append(row)
    return grouped


def replace_values(owner: OwnerRef, items: Iterable[Mapping[str, Any]]) -> list[AttributeValue]:
    """
    Replace the owner's stored values with ``items``.

    Each item is ``{"attribute_id": <id>, "value": <value>}``. Later items for
    the same attribute win.
    """
    submitted: dict[int, Any] = {}
    for item in items:
        submitted[int(item["attribute_id"])] = item.get("value")

    attributes = Attribute.objects.in_bulk(list(submitted.keys()))
    with transaction.atomic():
        values_for(owner).delete()
        created = AttributeValue.objects.bulk_create(
            [
                AttributeValue(
                    attribute=attributes[attribute_id],
                    owner_type=owner.owner_type,
                    owner_id=owner.owner_id,
                    value=normalize_value(attributes[attribute_id], value),
                )
                for attribute_id, value in submitted.items()
                if attribute_id in attributes
            ]
        )
    logger.info(
        "Replaced attribute values for %s:%s (%s values)",
        owner.owner_type,
        owner.owner_id,
        len(created),
    )
    return created


def delete_for_owner(owner: OwnerRef) -> int:
    deleted, _ = values_for(owner).delete()
    return deleted
