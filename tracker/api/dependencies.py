from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from tracker.config import Settings
from tracker.infrastructure.db_factory import PoolManager
from tracker.stores.abstract import PeopleLookup, UserStore, WorklogStore


@dataclass
class ApplicationContainer:
    settings: Settings
    user_store: UserStore
    worklog_store: WorklogStore
    people: PeopleLookup
    pool_manager: Optional[PoolManager] = None


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container  # type: ignore[no-any-return]


def get_user_store(request: Request) -> UserStore:
    return get_container(request).user_store


def get_worklog_store(request: Request) -> WorklogStore:
    return get_container(request).worklog_store


def get_people_lookup(request: Request) -> PeopleLookup:
    return get_container(request).people


def get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "")
