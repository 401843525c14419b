"""
HTTP layer for the time tracker.

Thin FastAPI adapters: routers decode and validate requests, call the
stores and the people-info client, and exception handlers translate domain
errors into status codes.
"""

from tracker.api.app import create_application
from tracker.api.dependencies import ApplicationContainer

__all__ = ["ApplicationContainer", "create_application"]
