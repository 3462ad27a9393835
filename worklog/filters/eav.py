"""
Batched EAV filtering.

All attribute filters collected for one request are applied through a single
correlated ``EXISTS`` sub-query over ``AttributeValue``. An owner matches when
every filtered attribute has a stored value satisfying its conditions, so the
outer query never joins the value table and never duplicates rows.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from django.db.models import Case, Count, DateField, Exists, OuterRef, Q, Value, When
from django.db.models.functions import Cast, Substr

from ..models import AttributeType, AttributeValue
from ..utils.datetime_utils import parse_date
from .operators import (
    COMPARISON_OPERATORS,
    PATTERN_OPERATORS,
    ParsedFilter,
    build_condition,
    comparison_lookup,
    pattern_q,
    strip_wildcards,
    wrap_wildcards,
)

logger = logging.getLogger(__name__)

ISO_DATE_PREFIX = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}"


class UnusableEavValue(ValueError):
    pass


def value_condition(condition: ParsedFilter) -> Q:
    """Build the ``Q`` matching a stored value for ``condition``."""
    attribute_type = condition.attribute.type
    operator = condition.operator
    value = condition.value

    if attribute_type == AttributeType.SELECT:
        if operator in PATTERN_OPERATORS:
            return pattern_q("value", wrap_wildcards(str(value)))
        return Q(value__iexact=str(value).strip())

    if attribute_type == AttributeType.DATE:
        if operator in PATTERN_OPERATORS:
            month = strip_wildcards(str(value)).strip()[:7]
            return Q(value_month__contains=month)
        parsed = parse_date(value)
        if parsed is None:
            raise UnusableEavValue("Invalid date format")
        if operator not in COMPARISON_OPERATORS:
            operator = "="
        return Q(**{f"value_date__{comparison_lookup(operator)}": parsed})

    if operator in PATTERN_OPERATORS:
        value = wrap_wildcards(str(value))
    return build_condition("value", operator, value)


def _annotated_values():
    return AttributeValue.objects.annotate(
        value_date=Case(
            When(value__regex=ISO_DATE_PREFIX, then=Cast(Substr("value", 1, 10), DateField())),
            default=Value(None),
            output_field=DateField(),
        ),
        value_month=Substr("value", 1, 7),
    )


def build_match_subquery(owner_type: str, conditions: Iterable[ParsedFilter]):
    """
    Return an ``Exists`` requiring every attribute in ``conditions`` to match.

    Conditions on the same attribute must hold for the same stored value.
    """
    per_attribute: dict[int, Q] = defaultdict(Q)
    for condition in conditions:
        per_attribute[condition.attribute.pk] &= value_condition(condition)
    if not per_attribute:
        return None

    matches = Q()
    for attribute_id, condition_q in per_attribute.items():
        matches |= Q(attribute_id=attribute_id) & condition_q

    subquery = (
        _annotated_values()
        .filter(
            owner_type=owner_type,
            owner_id=OuterRef("pk"),
            attribute_id__in=list(per_attribute.keys()),
        )
        .filter(matches)
        .order_by()
        .values("owner_id")
        .annotate(matched=Count("attribute_id", distinct=True))
        .filter(matched=len(per_attribute))
    )
    return Exists(subquery)


def build_missing_subquery(owner_type: str, conditions: Iterable[ParsedFilter]):
    """Return an ``Exists`` over stored, non-empty values for the attributes."""
    attribute_ids = sorted({condition.attribute.pk for condition in conditions})
    if not attribute_ids:
        return None
    present = (
        AttributeValue.objects.filter(
            owner_type=owner_type,
            owner_id=OuterRef("pk"),
            attribute_id__in=attribute_ids,
        )
        .exclude(value__isnull=True)
        .exclude(value="")
    )
    return Exists(present)


def apply_eav_conditions(queryset, owner_type: str, conditions: list[ParsedFilter]):
    """
    Apply deferred attribute filters to ``queryset``.

    ``None`` values select owners without a stored value for the attribute.
    """
    if not conditions:
        return queryset

    valued = [c for c in conditions if not c.is_null]
    missing = [c for c in conditions if c.is_null]

    match = build_match_subquery(owner_type, valued)
    if match is not None:
        queryset = queryset.filter(match)

    absent = build_missing_subquery(owner_type, missing)
    if absent is not None:
        queryset = queryset.exclude(absent)

    logger.info(
        "Applied EAV filters: %s",
        [(c.attribute.name, c.operator, c.value) for c in conditions],
    )
    return queryset
