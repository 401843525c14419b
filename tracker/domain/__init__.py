"""
Domain package for the time tracker.

Exports the core domain models, the error hierarchy and passport parsing.
Keep this package focused on data definitions and validation concerns.
"""

from tracker.domain.errors import (
    AlreadyDoneError,
    ConflictError,
    InfrastructureError,
    InvalidFormatError,
    InvalidRangeError,
    NotFoundError,
    PassportDuplicateError,
    PeopleLookupError,
    StoreError,
    TrackerError,
    UserNotFoundError,
    ValidationError,
    WorklogNotFoundError,
)
from tracker.domain.models import FilterBy, Pagination, Passport, People, User, Worklog
from tracker.domain.passport import parse_passport

__all__ = [
    # Models
    "FilterBy",
    "Pagination",
    "Passport",
    "People",
    "User",
    "Worklog",
    # Errors
    "AlreadyDoneError",
    "ConflictError",
    "InfrastructureError",
    "InvalidFormatError",
    "InvalidRangeError",
    "NotFoundError",
    "PassportDuplicateError",
    "PeopleLookupError",
    "StoreError",
    "TrackerError",
    "UserNotFoundError",
    "ValidationError",
    "WorklogNotFoundError",
    # Parsing
    "parse_passport",
]
