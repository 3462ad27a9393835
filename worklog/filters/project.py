from ..models import OwnerType, Project
from .base import QueryFilterSet
from .fields import DateOperatorFilter, TextOperatorFilter


class ProjectFilterSet(QueryFilterSet):
    """Static project columns plus project attribute values."""

    eav_owner_type = OwnerType.PROJECT

    name = TextOperatorFilter()
    description = TextOperatorFilter()
    status = TextOperatorFilter()
    created_at = DateOperatorFilter()
    updated_at = DateOperatorFilter()

    class Meta:
        model = Project
        fields = []
