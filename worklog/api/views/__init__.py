from .attributes import AttributeDetailView, AttributeListView
from .auth import CurrentUserView, LoginView, LogoutView, RegisterView
from .base import BaseAPIView
from .cache_admin import CacheManagementAPIView
from .projects import ProjectDetailView, ProjectListView
from .timesheets import TimesheetDetailView, TimesheetListView
from .users import UserDetailView, UserListView

__all__ = [
    "AttributeDetailView",
    "AttributeListView",
    "BaseAPIView",
    "CacheManagementAPIView",
    "CurrentUserView",
    "LoginView",
    "LogoutView",
    "ProjectDetailView",
    "ProjectListView",
    "RegisterView",
    "TimesheetDetailView",
    "TimesheetListView",
    "UserDetailView",
    "UserListView",
]
