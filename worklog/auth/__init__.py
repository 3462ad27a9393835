"""Token authentication for the worklog API."""

from .jwt import JWTManager

__all__ = ["JWTManager"]
