"""Request and response bodies for the HTTP API."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import BaseModel, Field

from tracker.domain.models import Passport, People, User, Worklog

# users.id and worklogs.id are SERIAL (int4); LIMIT and OFFSET take bigint.
MAX_ID = 2**31 - 1
MAX_BIGINT = 2**63 - 1


class ErrorResponse(BaseModel):
    status: str = Field(..., description="User-level status message.")
    error: Optional[str] = Field(None, description="Application-level error message.")


class CreateUserRequest(BaseModel):
    passportNumber: str = Field(..., examples=["1234 567890"])


class CreateUserResponse(BaseModel):
    user_id: int


class PassportPatch(BaseModel):
    serie: str = ""
    number: str = ""


class PeoplePatch(BaseModel):
    name: str = ""
    surname: str = ""
    patronymic: str = ""
    address: str = ""


class UpdateUserRequest(BaseModel):
    """Only non-empty fields are applied."""

    passport: PassportPatch = Field(default_factory=PassportPatch)
    people: PeoplePatch = Field(default_factory=PeoplePatch)

    def to_user(self, user_id: int) -> User:
        return User(
            id=user_id,
            passport=Passport(**self.passport.model_dump()),
            people=People(**self.people.model_dump()),
        )


class UserResponse(BaseModel):
    id: int
    passport: Passport
    people: People

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, passport=user.passport, people=user.people)


class UsersResponse(BaseModel):
    users: List[UserResponse]


class StartWorklogRequest(BaseModel):
    task: str = Field(..., min_length=1)
    user_id: int = Field(..., ge=1, le=MAX_ID)


class StartWorklogResponse(BaseModel):
    worklog_id: int


def format_duration(duration: timedelta) -> str:
    total_minutes = int(duration.total_seconds()) // 60
    return f"{total_minutes // 60}h {total_minutes % 60}m"


def format_time(value: datetime) -> str:
    return value.strftime("%Y-%m-%d, %H:%M:%S")


class WorklogResponse(BaseModel):
    id: int
    user_id: int
    task: str
    start_time: str
    end_time: Optional[str] = Field(None, description="Null while the worklog is open.")
    duration: str

    @classmethod
    def from_worklog(cls, worklog: Worklog, now: Optional[datetime] = None) -> "WorklogResponse":
        return cls(
            id=worklog.id,
            user_id=worklog.user_id,
            task=worklog.task,
            start_time=format_time(worklog.started_at),
            end_time=format_time(worklog.finished_at) if worklog.finished_at else None,
            duration=format_duration(worklog.duration(now)),
        )
