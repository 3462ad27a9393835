from ..models import Timesheet
from .base import QueryFilterSet
from .fields import DateOperatorFilter, NumberOperatorFilter, TextOperatorFilter


class TimesheetFilterSet(QueryFilterSet):
    hours = NumberOperatorFilter()
    task_name = TextOperatorFilter()
    date = DateOperatorFilter()
    created_at = DateOperatorFilter()
    updated_at = DateOperatorFilter()

    class Meta:
        model = Timesheet
        fields = []
