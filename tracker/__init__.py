"""
Time Tracker - worker time-tracking backend.

Manages user records (identified by passport data, enriched through an
external people-info service) and worklogs (task start/finish timestamps per
user) over PostgreSQL, exposed as an HTTP API:

- Dynamic filter/pagination queries for user listing
- Partial user updates
- Race-safe worklog start/finish state transitions
"""

from __future__ import annotations

__version__ = "1.0.0"
__license__ = "MIT"

# Public API exports
from tracker.config import Settings, get_settings
from tracker.domain import (
    FilterBy,
    Pagination,
    Passport,
    People,
    User,
    Worklog,
    parse_passport,
)
from tracker.stores import (
    PostgresUserStore,
    PostgresWorklogStore,
    build_update_user_query,
    build_users_query,
)
from tracker.utils.logging import configure_for_env, configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "FilterBy",
    "Pagination",
    "Passport",
    "People",
    "User",
    "Worklog",
    "parse_passport",
    # Stores
    "PostgresUserStore",
    "PostgresWorklogStore",
    "build_update_user_query",
    "build_users_query",
    # Logging
    "configure_for_env",
    "configure_logging",
    "get_logger",
]
