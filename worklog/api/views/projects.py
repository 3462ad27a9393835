"""
Project endpoints.
"""

import logging

from django.db import transaction

from ...filters import ProjectFilterSet
from ...models import Project
from ...services.attribute_values import OwnerRef, delete_for_owner, replace_values
from ..forms import ProjectForm
from ..resources import project_collection, project_resource
from .base import BaseAPIView

logger = logging.getLogger(__name__)

PROJECT_ROUTES = ("api/projects",)


class ProjectListView(BaseAPIView):
    """GET lists projects (filtered, paginated); POST creates one."""

    def get(self, request):
        filterset = ProjectFilterSet.from_request(request, queryset=Project.objects.all())
        queryset = filterset.qs.order_by("-created_at", "-id")
        return self.json_response(self.paginate(request, queryset, project_collection))

    def post(self, request):
        form = ProjectForm(self.parse_json_body(request))
        data = self.validate(form)
        attributes = data.pop("attributes", None)

        with transaction.atomic():
            project = Project.objects.create(**data)
            project.users.add(request.user)
            if attributes:
                replace_values(OwnerRef.for_project(project), attributes)

        logger.info(
            "Project created: project_id=%s assigned_user_id=%s", project.pk, request.user.pk
        )
        self.invalidate(request, *PROJECT_ROUTES)
        return self.json_response(project_resource(project), status=201)


class ProjectDetailView(BaseAPIView):
    def get(self, request, pk: int):
        project = self.get_object_or_raise("Project", Project, pk)
        return self.json_response(project_resource(project))

    def put(self, request, pk: int):
        project = self.get_object_or_raise("Project", Project, pk)
        form = ProjectForm(self.parse_json_body(request), instance=project, partial=True)
        data = self.validate(form)
        attributes = data.pop("attributes", None)

        with transaction.atomic():
            for field, value in data.items():
                setattr(project, field, value)
            project.save()
            if attributes is not None:
                replace_values(OwnerRef.for_project(project), attributes)

        logger.info("Project updated: project_id=%s fields=%s", project.pk, sorted(data))
        self.invalidate(request, *PROJECT_ROUTES)
        return self.json_response(project_resource(project))

    patch = put

    def delete(self, request, pk: int):
        project = self.get_object_or_raise("Project", Project, pk)
        with transaction.atomic():
            delete_for_owner(OwnerRef.for_project(project))
            project.delete()

        logger.info("Project deleted: project_id=%s", pk)
        self.invalidate(request, *PROJECT_ROUTES, "api/timesheets")
        return self.no_content()
