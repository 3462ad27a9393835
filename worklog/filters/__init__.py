"""
Request-driven query filters for the worklog list endpoints.
"""

from .attribute import AttributeFilterSet
from .base import QueryFilterSet, extract_filters
from .operators import OPERATORS, ParsedFilter, parse_operator
from .project import ProjectFilterSet
from .registry import AttributeRegistry
from .timesheet import TimesheetFilterSet
from .validator import FilterValidator

__all__ = [
    "AttributeFilterSet",
    "AttributeRegistry",
    "FilterValidator",
    "OPERATORS",
    "ParsedFilter",
    "ProjectFilterSet",
    "QueryFilterSet",
    "TimesheetFilterSet",
    "extract_filters",
    "parse_operator",
]
