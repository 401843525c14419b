"""
Stores package for the time tracker.

Re-exports the store interfaces, the PostgreSQL implementations and the
query builders so callers can import from `tracker.stores` directly.
"""

from tracker.stores.abstract import PeopleLookup, UserStore, WorklogStore
from tracker.stores.queries import build_update_user_query, build_users_query
from tracker.stores.users import PostgresUserStore
from tracker.stores.worklogs import PostgresWorklogStore

__all__ = [
    # Interfaces
    "PeopleLookup",
    "UserStore",
    "WorklogStore",
    # Implementations
    "PostgresUserStore",
    "PostgresWorklogStore",
    # Query builders
    "build_update_user_query",
    "build_users_query",
]
