"""
URL configuration for the worklog REST API.
"""

from django.urls import path

from .api.views import (
    AttributeDetailView,
    AttributeListView,
    CacheManagementAPIView,
    CurrentUserView,
    LoginView,
    LogoutView,
    ProjectDetailView,
    ProjectListView,
    RegisterView,
    TimesheetDetailView,
    TimesheetListView,
    UserDetailView,
    UserListView,
)

app_name = "worklog"

urlpatterns = [
    path("api/register", RegisterView.as_view(), name="register"),
    path("api/login", LoginView.as_view(), name="login"),
    path("api/logout", LogoutView.as_view(), name="logout"),
    path("api/user", CurrentUserView.as_view(), name="current-user"),
    path("api/attributes", AttributeListView.as_view(), name="attribute-list"),
    path("api/attributes/<int:pk>", AttributeDetailView.as_view(), name="attribute-detail"),
    path("api/projects", ProjectListView.as_view(), name="project-list"),
    path("api/projects/<int:pk>", ProjectDetailView.as_view(), name="project-detail"),
    path("api/timesheets", TimesheetListView.as_view(), name="timesheet-list"),
    path("api/timesheets/<int:pk>", TimesheetDetailView.as_view(), name="timesheet-detail"),
    path("api/users", UserListView.as_view(), name="user-list"),
    path("api/users/<int:pk>", UserDetailView.as_view(), name="user-detail"),
    path("api/cache", CacheManagementAPIView.as_view(), name="cache-management"),
]
