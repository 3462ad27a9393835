"""
Timesheet endpoints.

Timesheets belong to one user: lists only contain the requesting user's
entries and other users' entries are refused unless the requester is staff.
"""

import logging

from ...core.exceptions import AccessDeniedError
from ...filters import TimesheetFilterSet
from ...models import Timesheet
from ..forms import TimesheetForm
from ..resources import timesheet_resource
from .base import BaseAPIView

logger = logging.getLogger(__name__)

TIMESHEET_ROUTES = ("api/timesheets",)


def _serialize_page(timesheets):
    return [timesheet_resource(t) for t in timesheets]


class TimesheetListView(BaseAPIView):
    def get(self, request):
        filterset = TimesheetFilterSet.from_request(
            request, queryset=Timesheet.objects.filter(user=request.user)
        )
        queryset = filterset.qs.order_by("-date", "-created_at", "-id")
        return self.json_response(self.paginate(request, queryset, _serialize_page))

    def post(self, request):
        form = TimesheetForm(self.parse_json_body(request), user=request.user)
        data = self.validate(form)
        timesheet = Timesheet.objects.create(**data)

        logger.info(
            "Timesheet created: timesheet_id=%s project_id=%s user_id=%s",
            timesheet.pk,
            timesheet.project_id,
            timesheet.user_id,
        )
        self.invalidate(request, *TIMESHEET_ROUTES)
        return self.json_response(timesheet_resource(timesheet), status=201)


class TimesheetDetailView(BaseAPIView):
    def get_timesheet(self, request, pk: int) -> Timesheet:
        timesheet = self.get_object_or_raise("Timesheet", Timesheet, pk)
        if timesheet.user_id != request.user.pk and not request.user.is_staff:
            logger.warning(
                "User %s refused access to timesheet %s", request.user.pk, timesheet.pk
            )
            raise AccessDeniedError("You do not have permission to access this timesheet")
        return timesheet

    def get(self, request, pk: int):
        return self.json_response(timesheet_resource(self.get_timesheet(request, pk)))

    def put(self, request, pk: int):
        timesheet = self.get_timesheet(request, pk)
        form = TimesheetForm(self.parse_json_body(request), user=request.user, partial=True)
        data = self.validate(form)
        for field, value in data.items():
            setattr(timesheet, field, value)
        timesheet.save()
        timesheet.refresh_from_db()

        logger.info("Timesheet updated: timesheet_id=%s fields=%s", timesheet.pk, sorted(data))
        self.invalidate(request, *TIMESHEET_ROUTES)
        return self.json_response(timesheet_resource(timesheet))

    patch = put

    def delete(self, request, pk: int):
        timesheet = self.get_timesheet(request, pk)
        timesheet.delete()

        logger.info("Timesheet deleted: timesheet_id=%s", pk)
        self.invalidate(request, *TIMESHEET_ROUTES)
        return self.no_content()
