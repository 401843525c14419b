from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterator, List, Optional

import pytest
from fastapi.testclient import TestClient

from tracker.api.app import create_application
from tracker.api.dependencies import ApplicationContainer
from tracker.api.schemas import WorklogResponse, format_duration
from tracker.config import Settings
from tracker.domain.errors import (
    AlreadyDoneError,
    PassportDuplicateError,
    PeopleLookupError,
    StoreError,
    UserNotFoundError,
)
from tracker.domain.models import FilterBy, Pagination, People, User, Worklog
from tracker.stores.worklogs import PostgresWorklogStore

STARTED = datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)
WINDOW = {"start_date": "2024-01-01T00:00:00Z", "end_date": "2024-01-31T00:00:00Z"}
RENAME = {"people": {"name": "Petr"}}


class _FakeUserStore:
    def __init__(self) -> None:
        self.users_by_id: dict[int, User] = {}
        self.last_filter: Optional[FilterBy] = None
        self.last_pagination: Optional[Pagination] = None
        self.updated: List[User] = []
        self.fail: Optional[Exception] = None

    async def create_user(self, user: User, timeout: Optional[float] = None) -> int:
        for existing in self.users_by_id.values():
            if existing.passport == user.passport:
                raise PassportDuplicateError(op="users.create_user")
        user_id = len(self.users_by_id) + 1
        self.users_by_id[user_id] = user.model_copy(update={"id": user_id})
        return user_id

    async def users(
        self, filter_by: FilterBy, pagination: Pagination, timeout: Optional[float] = None
    ) -> List[User]:
        if self.fail is not None:
            raise self.fail
        self.last_filter, self.last_pagination = filter_by, pagination
        return list(self.users_by_id.values())

    async def update_user(self, user: User, timeout: Optional[float] = None) -> None:
        if user.id not in self.users_by_id:
            raise UserNotFoundError(f"user {user.id} not found", op="users.update_user")
        self.updated.append(user)

    async def delete_user(self, user_id: int, timeout: Optional[float] = None) -> None:
        if self.users_by_id.pop(user_id, None) is None:
            raise UserNotFoundError(f"user {user_id} not found", op="users.delete_user")


class _FakeWorklogStore:
    def __init__(self) -> None:
        self.open_ids: set[int] = set()
        self.listed: List[Worklog] = []
        self.next_id = 1

    async def start_worklog(self, task: str, user_id: int, timeout: Optional[float] = None) -> int:
        worklog_id = self.next_id
        self.next_id += 1
        self.open_ids.add(worklog_id)
        return worklog_id

    async def finish_worklog(self, worklog_id: int, timeout: Optional[float] = None) -> None:
        if worklog_id not in self.open_ids:
            raise AlreadyDoneError(op="worklogs.finish_worklog")
        self.open_ids.discard(worklog_id)

    async def worklogs(
        self,
        user_id: int,
        start_date: datetime,
        end_date: datetime,
        timeout: Optional[float] = None,
    ) -> List[Worklog]:
        return self.listed


class _FakePeople:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.fail = False

    async def lookup(self, serie: str, number: str) -> People:
        self.calls.append((serie, number))
        if self.fail:
            raise PeopleLookupError("unexpected status code: 500", op="people_client.lookup")
        return People(name="Ivan", surname="Ivanov", patronymic="Ivanovich", address="Moscow")


class _UntouchablePool:
    def acquire(self, timeout: Optional[float] = None):
        raise AssertionError("range must be validated before a connection is taken")


@pytest.fixture
def container() -> ApplicationContainer:
    return ApplicationContainer(
        settings=Settings(APP_ENV="test"),
        user_store=_FakeUserStore(),
        worklog_store=_FakeWorklogStore(),
        people=_FakePeople(),
    )


@pytest.fixture
def client(container: ApplicationContainer) -> Iterator[TestClient]:
    app = create_application(settings=container.settings, container=container)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert response.headers["X-Request-ID"]


def test_create_user_enriches_from_lookup(client: TestClient, container: ApplicationContainer) -> None:
    response = client.post("/users", json={"passportNumber": "1234 567890"})

    assert response.status_code == 201
    assert response.json() == {"user_id": 1}
    assert container.people.calls == [("1234", "567890")]
    stored = container.user_store.users_by_id[1]
    assert stored.people.surname == "Ivanov"
    assert stored.passport.number == "567890"


def test_create_user_with_malformed_passport_is_400(
    client: TestClient, container: ApplicationContainer
) -> None:
    response = client.post("/users", json={"passportNumber": "AB12 123456"})

    assert response.status_code == 400
    assert response.json()["status"] == "Invalid request."
    assert "AB12 123456" in response.json()["error"]
    assert container.people.calls == []


def test_create_user_without_body_is_400(client: TestClient) -> None:
    response = client.post("/users")

    assert response.status_code == 400


def test_duplicate_passport_is_409(client: TestClient) -> None:
    client.post("/users", json={"passportNumber": "1234 567890"})

    response = client.post("/users", json={"passportNumber": "1234 567890"})

    assert response.status_code == 409
    assert response.json()["status"] == "Conflict."


def test_lookup_failure_is_502(client: TestClient, container: ApplicationContainer) -> None:
    container.people.fail = True

    response = client.post("/users", json={"passportNumber": "1234 567890"})

    assert response.status_code == 502
    assert "unexpected status code" in response.json()["error"]


def test_list_users_maps_query_parameters(
    client: TestClient, container: ApplicationContainer
) -> None:
    client.post("/users", json={"passportNumber": "1234 567890"})

    response = client.get(
        "/users",
        params={
            "name": "Ivan",
            "serie": "1234",
            "created_after": "2024-01-01T00:00:00Z",
            "limit": 10,
            "offset": 5,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["users"][0]["id"] == 1
    assert body["users"][0]["passport"] == {"serie": "1234", "number": "567890"}
    assert "created_at" not in body["users"][0]
    store = container.user_store
    assert store.last_filter.name == "Ivan"
    assert store.last_filter.passport_serie == "1234"
    assert store.last_filter.created_after == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert store.last_pagination == Pagination(limit=10, offset=5)


def test_list_users_store_failure_is_500(client: TestClient, container: ApplicationContainer) -> None:
    container.user_store.fail = StoreError("connection refused", op="users.users")

    response = client.get("/users")

    assert response.status_code == 500
    assert response.json() == {
        "status": "Internal server error.",
        "error": "users.users: connection refused",
    }


def test_update_user_passes_only_supplied_fields(
    client: TestClient, container: ApplicationContainer
) -> None:
    client.post("/users", json={"passportNumber": "1234 567890"})

    response = client.patch("/users/1", json={"people": {"address": "Kazan"}})

    assert response.status_code == 204
    updated = container.user_store.updated[0]
    assert updated.id == 1
    assert updated.people.address == "Kazan"
    assert updated.people.name == ""
    assert updated.passport.serie == ""


def test_update_missing_user_is_404(client: TestClient) -> None:
    response = client.patch("/users/77", json={"people": {"name": "Petr"}})

    assert response.status_code == 404
    assert response.json()["status"] == "Not found."


def test_invalid_user_id_is_400(client: TestClient) -> None:
    response = client.delete("/users/abc")

    assert response.status_code == 400


def test_delete_user(client: TestClient) -> None:
    client.post("/users", json={"passportNumber": "1234 567890"})

    assert client.delete("/users/1").status_code == 204
    assert client.delete("/users/1").status_code == 404


def test_start_and_finish_worklog(client: TestClient) -> None:
    response = client.post("/worklogs/start", json={"task": "write report", "user_id": 1})

    assert response.status_code == 201
    worklog_id = response.json()["worklog_id"]
    assert client.patch(f"/worklogs/finish/{worklog_id}").status_code == 204

    second = client.patch(f"/worklogs/finish/{worklog_id}")
    assert second.status_code == 409
    assert second.json()["error"] == "worklogs.finish_worklog: worklog was already finished"


def test_list_worklogs_formats_entries(client: TestClient, container: ApplicationContainer) -> None:
    container.worklog_store.listed = [
        Worklog(
            id=1,
            user_id=5,
            task="write report",
            started_at=STARTED,
            finished_at=STARTED + timedelta(hours=2, minutes=30),
        )
    ]

    response = client.get(
        "/users/5/worklogs",
        params={"start_date": "2024-01-01T00:00:00Z", "end_date": "2024-01-31T00:00:00Z"},
    )

    assert response.status_code == 200
    assert response.json() == [
        {
            "id": 1,
            "user_id": 5,
            "task": "write report",
            "start_time": "2024-01-10, 09:00:00",
            "end_time": "2024-01-10, 11:30:00",
            "duration": "2h 30m",
        }
    ]


def test_list_worklogs_reversed_range_is_400(
    client: TestClient, container: ApplicationContainer
) -> None:
    container.worklog_store = PostgresWorklogStore(_UntouchablePool())

    response = client.get(
        "/users/5/worklogs",
        params={"start_date": "2024-01-31T00:00:00Z", "end_date": "2024-01-01T00:00:00Z"},
    )

    assert response.status_code == 400
    assert response.json()["status"] == "Invalid request."


def test_open_worklog_response_has_no_end_time() -> None:
    worklog = Worklog(id=3, user_id=5, task="ongoing", started_at=STARTED)

    response = WorklogResponse.from_worklog(worklog, now=STARTED + timedelta(minutes=45))

    assert response.end_time is None
    assert response.duration == "0h 45m"


def test_format_duration_spans_days() -> None:
    assert format_duration(timedelta(days=1, hours=1, minutes=5, seconds=59)) == "25h 5m"


@pytest.mark.parametrize(
    ("method", "path", "kwargs"),
    [
        ("DELETE", "/users/3000000000", {}),
        ("DELETE", "/users/0", {}),
        ("PATCH", "/users/3000000000", {"json": RENAME}),
        ("PATCH", "/worklogs/finish/3000000000", {}),
        ("GET", "/users/3000000000/worklogs", {"params": WINDOW}),
    ],
)
def test_out_of_range_ids_are_400(
    client: TestClient, method: str, path: str, kwargs: dict
) -> None:
    response = client.request(method, path, **kwargs)

    assert response.status_code == 400
    assert response.json()["status"] == "Invalid request."


def test_start_worklog_with_out_of_range_user_is_400(client: TestClient) -> None:
    response = client.post("/worklogs/start", json={"task": "write report", "user_id": 2**31})

    assert response.status_code == 400


@pytest.mark.parametrize("params", [{"limit": -1}, {"offset": -5}, {"limit": 2**63}])
def test_out_of_range_pagination_is_400(client: TestClient, params: dict) -> None:
    response = client.get("/users", params=params)

    assert response.status_code == 400
