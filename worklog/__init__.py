"""
worklog - project and timesheet tracking API.

Provides EAV attributes for projects and users, request-driven query filters
and a tracked HTTP response cache on top of Django.
"""

__version__ = "0.1.0"
