"""
Domain models for the time tracker.

Mirrors the `users` and `worklogs` tables from `db/migrations`. Stores map
rows into these models; the HTTP layer maps them into response schemas.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, Field

_VALUE_CONFIG = {
    "frozen": True,
    "populate_by_name": True,
    "arbitrary_types_allowed": False,
}


class Passport(BaseModel):
    """
    Passport series/number pair. Empty strings mean "not supplied" in partial updates.
    """

    serie: str = Field("", description="4-character passport series.")
    number: str = Field("", description="6-character passport number.")

    model_config = _VALUE_CONFIG


class People(BaseModel):
    """
    Personal info returned by the external people-info service.
    """

    name: str = ""
    surname: str = ""
    patronymic: str = ""
    address: str = ""

    model_config = _VALUE_CONFIG


class User(BaseModel):
    """
    Representation of a single row in the `users` table.
    """

    id: Optional[int] = Field(None, description="Surrogate key, assigned on insert.")
    created_at: Optional[datetime] = Field(None, description="Row creation timestamp.")
    updated_at: Optional[datetime] = Field(None, description="Last mutation timestamp.")
    passport: Passport = Field(default_factory=Passport)
    people: People = Field(default_factory=People)

    model_config = _VALUE_CONFIG


class FilterBy(BaseModel):
    """
    Exact-match filters for user listing. Empty values do not constrain.
    """

    name: str = ""
    surname: str = ""
    patronymic: str = ""
    address: str = ""
    passport_serie: str = ""
    passport_number: str = ""
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None

    model_config = _VALUE_CONFIG


class Pagination(BaseModel):
    """
    LIMIT/OFFSET settings. Non-positive values are ignored.
    """

    limit: int = 0
    offset: int = 0

    model_config = _VALUE_CONFIG


class Worklog(BaseModel):
    """
    Representation of a single row in the `worklogs` table.

    A worklog is open while `finished_at` is None and closed once it is set.
    """

    id: int
    user_id: int
    task: str
    started_at: datetime
    finished_at: Optional[datetime] = None

    model_config = _VALUE_CONFIG

    @property
    def is_open(self) -> bool:
        return self.finished_at is None

    def duration(self, now: Optional[datetime] = None) -> timedelta:
        """
        Time spent on the task; open worklogs are measured up to `now`.
        """
        if self.finished_at is not None:
            return self.finished_at - self.started_at
        if now is None:
            now = datetime.now(self.started_at.tzinfo or timezone.utc)
        return now - self.started_at


__all__ = ["Passport", "People", "User", "FilterBy", "Pagination", "Worklog"]
