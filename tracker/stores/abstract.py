"""
Store interfaces consumed by the HTTP layer.

The PostgreSQL stores implement these protocols; tests substitute in-memory
fakes. Every operation takes an optional per-call `timeout` (seconds) and
honours asyncio cancellation.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable

from tracker.domain.models import FilterBy, Pagination, People, User, Worklog


@runtime_checkable
class UserStore(Protocol):
    async def create_user(self, user: User, timeout: Optional[float] = None) -> int:
        """Insert a user and return its ID. Raises PassportDuplicateError."""
        ...

    async def users(
        self,
        filter_by: FilterBy,
        pagination: Pagination,
        timeout: Optional[float] = None,
    ) -> List[User]:
        """List users matching the filter; an empty list is a valid result."""
        ...

    async def update_user(self, user: User, timeout: Optional[float] = None) -> None:
        """Apply a partial update. Raises UserNotFoundError, PassportDuplicateError."""
        ...

    async def delete_user(self, user_id: int, timeout: Optional[float] = None) -> None:
        """Delete a user. Raises UserNotFoundError."""
        ...


@runtime_checkable
class WorklogStore(Protocol):
    async def start_worklog(
        self, task: str, user_id: int, timeout: Optional[float] = None
    ) -> int:
        """Open a worklog for the user and return its ID."""
        ...

    async def finish_worklog(self, worklog_id: int, timeout: Optional[float] = None) -> None:
        """Close an open worklog. Raises AlreadyDoneError, WorklogNotFoundError."""
        ...

    async def worklogs(
        self,
        user_id: int,
        start_date: datetime,
        end_date: datetime,
        timeout: Optional[float] = None,
    ) -> List[Worklog]:
        """List the user's worklogs within the window. Raises InvalidRangeError."""
        ...


@runtime_checkable
class PeopleLookup(Protocol):
    async def lookup(self, serie: str, number: str) -> People:
        """Resolve passport data into personal info. Raises PeopleLookupError."""
        ...


__all__ = ["UserStore", "WorklogStore", "PeopleLookup"]
