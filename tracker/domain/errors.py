"""
Domain error hierarchy for the time tracker.

Errors are grouped by the outward signal they map to:

- ValidationError: caller sent something malformed (400)
- NotFoundError: the referenced entity does not exist (404)
- ConflictError: the request clashes with current state (409)
- InfrastructureError: the store or the people-info service failed (5xx)

Each error may carry the name of the operation that raised it; it is
prefixed to the message for diagnosability.
"""

from __future__ import annotations

from typing import Optional


class TrackerError(Exception):
    """Base class for every error raised by the tracker."""

    default_message: str = "time tracker error"

    def __init__(self, message: Optional[str] = None, *, op: Optional[str] = None) -> None:
        self.message = message or self.default_message
        self.op = op
        super().__init__(f"{op}: {self.message}" if op else self.message)


class ValidationError(TrackerError):
    default_message = "invalid request"


class InvalidFormatError(ValidationError):
    default_message = "invalid passportNumber format, expected '**** ******'"


class InvalidRangeError(ValidationError):
    default_message = "end date should be after start date"


class NotFoundError(TrackerError):
    default_message = "not found"


class UserNotFoundError(NotFoundError):
    default_message = "user not found"


class WorklogNotFoundError(NotFoundError):
    default_message = "worklog not found"


class ConflictError(TrackerError):
    default_message = "conflict"


class PassportDuplicateError(ConflictError):
    default_message = "user with such serie and number already exists"


class AlreadyDoneError(ConflictError):
    default_message = "worklog was already finished"


class InfrastructureError(TrackerError):
    default_message = "infrastructure failure"


class StoreError(InfrastructureError):
    default_message = "database operation failed"


class PeopleLookupError(InfrastructureError):
    default_message = "failed to fetch people info"


__all__ = [
    "TrackerError",
    "ValidationError",
    "InvalidFormatError",
    "InvalidRangeError",
    "NotFoundError",
    "UserNotFoundError",
    "WorklogNotFoundError",
    "ConflictError",
    "PassportDuplicateError",
    "AlreadyDoneError",
    "InfrastructureError",
    "StoreError",
    "PeopleLookupError",
]
