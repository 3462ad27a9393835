"""
Request-driven filter sets.

``QueryFilterSet`` extends django-filter's ``FilterSet``: the raw
``filters[<field>]`` map is validated first, then each field is dispatched
to its declared filter. Fields without a declared filter that name an
attribute definition are deferred and applied together as one EAV
sub-query.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional

import django_filters

from ..core.exceptions import FilterValidationError
from ..core.settings import FilteringSettings
from ..utils.normalization import to_snake_case
from .eav import UnusableEavValue, apply_eav_conditions, value_condition
from .operators import ParsedFilter, parse_operator
from .registry import AttributeRegistry
from .validator import FilterValidator

logger = logging.getLogger(__name__)

_FILTER_PARAM_RE = re.compile(r"^filters\[([^\]]+)\]$")


def extract_filters(params: Mapping[str, Any]) -> dict[str, Any]:
    """
    Collect ``filters[<field>]=<value>`` query parameters.

    Empty strings become ``None``.

    Examples:
        >>> extract_filters({"filters[status]": "active", "page": "2"})
        {"status": "active"}
    """
    filters: dict[str, Any] = {}
    for key in params.keys():
        match = _FILTER_PARAM_RE.match(key)
        if not match:
            continue
        value = params.get(key)
        if isinstance(value, str):
            value = value if value.strip() != "" else None
        filters[match.group(1)] = value
    return filters


class QueryFilterSet(django_filters.FilterSet):
    """
    Base filter set for the list endpoints.

    Subclasses declare ``OperatorFilter`` instances for their static columns
    and set ``eav_owner_type`` when their model carries attribute values.
    """

    eav_owner_type: Optional[str] = None

    def __init__(
        self,
        data=None,
        queryset=None,
        *,
        request=None,
        prefix=None,
        registry: Optional[AttributeRegistry] = None,
        settings: Optional[FilteringSettings] = None,
    ):
        super().__init__(data=data, queryset=queryset, request=request, prefix=prefix)
        self.filtering_settings = settings or FilteringSettings.from_settings()
        self.soft_fail = self.filtering_settings.soft_fail_invalid_values
        self.registry = registry or AttributeRegistry()
        self.validator = FilterValidator(self.registry, self.filtering_settings)
        self._eav_conditions: list[ParsedFilter] = []

    @classmethod
    def from_request(cls, request, queryset=None, **kwargs) -> "QueryFilterSet":
        return cls(extract_filters(request.GET), queryset=queryset, request=request, **kwargs)

    @property
    def qs(self):
        if not hasattr(self, "_qs"):
            self._qs = self.filter_queryset(self.queryset.all())
        return self._qs

    def filter_queryset(self, queryset):
        self._eav_conditions = []
        raw_filters = dict(self.data)
        self.validator.validate(raw_filters)

        for field, value in raw_filters.items():
            handler = self.filters.get(to_snake_case(field))
            if handler is not None:
                queryset = handler.filter(queryset, value)
                continue
            self.defer_attribute_filter(field, value)

        if self.eav_owner_type and self._eav_conditions:
            queryset = apply_eav_conditions(
                queryset, self.eav_owner_type, self._eav_conditions
            )

        logger.debug(
            "Final %s query built from filters %s", type(self).__name__, raw_filters
        )
        return queryset

    def defer_attribute_filter(self, field: str, value: Any) -> None:
        if not self.eav_owner_type:
            logger.warning("%s has no handler for filter %r; ignored", type(self).__name__, field)
            return
        attribute = self.registry.resolve(field)
        if attribute is None:
            return

        if value is None:
            condition = ParsedFilter(field, "=", None, attribute)
        else:
            operator, parsed = parse_operator(value)
            condition = ParsedFilter(field, operator, parsed, attribute)
            try:
                value_condition(condition)
            except UnusableEavValue as exc:
                if not self.soft_fail:
                    raise FilterValidationError(errors={field: str(exc)})
                logger.warning(
                    "Invalid value for EAV filter %s: %r (%s)", attribute.name, value, exc
                )
                return
        self._eav_conditions.append(condition)
