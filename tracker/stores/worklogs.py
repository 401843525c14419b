"""
PostgreSQL-backed worklog store.

A worklog is Open while `finished_at` is NULL and Closed once it is set.
Closing is a single conditional UPDATE guarded by `finished_at IS NULL`, so
among any number of concurrent finish calls exactly one observes a
returned row; the rest get AlreadyDoneError.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

import asyncpg

from tracker.domain.errors import (
    AlreadyDoneError,
    InvalidRangeError,
    UserNotFoundError,
    WorklogNotFoundError,
)
from tracker.domain.models import Worklog
from tracker.stores.base import DB_ERRORS, PostgresStore
from tracker.stores.queries import as_utc

START_WORKLOG_SQL = """
    INSERT INTO worklogs (user_id, task, started_at)
    VALUES ($1, $2, NOW())
    RETURNING id
"""

FINISH_WORKLOG_SQL = """
    UPDATE worklogs
    SET finished_at = NOW()
    WHERE id = $1 AND finished_at IS NULL
    RETURNING id
"""

WORKLOG_EXISTS_SQL = "SELECT EXISTS (SELECT 1 FROM worklogs WHERE id = $1)"

# Open worklogs are ranked by the time elapsed so far.
LIST_WORKLOGS_SQL = """
    SELECT id, user_id, task, started_at, finished_at
    FROM worklogs
    WHERE user_id = $1 AND started_at >= $2 AND (finished_at <= $3 OR finished_at IS NULL)
    ORDER BY COALESCE(finished_at, NOW()) - started_at DESC, id
"""


def _row_to_worklog(row: asyncpg.Record) -> Worklog:
    return Worklog(
        id=row["id"],
        user_id=row["user_id"],
        task=row["task"],
        started_at=row["started_at"],
        finished_at=row["finished_at"],
    )


class PostgresWorklogStore(PostgresStore):
    """Start/finish/list over the `worklogs` table."""

    async def start_worklog(
        self, task: str, user_id: int, timeout: Optional[float] = None
    ) -> int:
        op = "worklogs.start_worklog"
        deadline = self._deadline(timeout)
        self._log.debug(
            "executing query",
            extra={"op": op, "query": START_WORKLOG_SQL, "task": task, "user_id": user_id},
        )
        try:
            async with self._pool.acquire(timeout=deadline) as conn:
                worklog_id = await conn.fetchval(
                    START_WORKLOG_SQL, user_id, task, timeout=deadline
                )
        except asyncpg.ForeignKeyViolationError as exc:
            raise UserNotFoundError(f"user {user_id} not found", op=op) from exc
        except DB_ERRORS as exc:
            raise self._failure(op, exc, user_id=user_id) from exc

        self._log.debug("worklog started successfully", extra={"op": op, "worklog_id": worklog_id})
        return worklog_id

    async def finish_worklog(self, worklog_id: int, timeout: Optional[float] = None) -> None:
        op = "worklogs.finish_worklog"
        deadline = self._deadline(timeout)
        self._log.debug("executing query", extra={"op": op, "query": FINISH_WORKLOG_SQL})
        try:
            async with self._pool.acquire(timeout=deadline) as conn:
                finished_id = await conn.fetchval(FINISH_WORKLOG_SQL, worklog_id, timeout=deadline)
                # Worklogs are never deleted, so a row that exists now existed
                # when the conditional update ran.
                exists = True
                if finished_id is None:
                    exists = await conn.fetchval(WORKLOG_EXISTS_SQL, worklog_id, timeout=deadline)
        except DB_ERRORS as exc:
            raise self._failure(op, exc, worklog_id=worklog_id) from exc

        if not exists:
            raise WorklogNotFoundError(f"worklog {worklog_id} not found", op=op)
        if finished_id is None:
            raise AlreadyDoneError(op=op)
        self._log.debug("worklog finished successfully", extra={"op": op, "worklog_id": worklog_id})

    async def worklogs(
        self,
        user_id: int,
        start_date: datetime,
        end_date: datetime,
        timeout: Optional[float] = None,
    ) -> List[Worklog]:
        op = "worklogs.worklogs"
        deadline = self._deadline(timeout)
        start_date, end_date = as_utc(start_date), as_utc(end_date)
        if end_date < start_date:
            raise InvalidRangeError(
                f"end date {end_date.isoformat()} is before start date {start_date.isoformat()}",
                op=op,
            )

        self._log.debug(
            "executing query",
            extra={
                "op": op,
                "query": LIST_WORKLOGS_SQL,
                "user_id": user_id,
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
            },
        )
        try:
            async with self._pool.acquire(timeout=deadline) as conn:
                rows = await conn.fetch(
                    LIST_WORKLOGS_SQL, user_id, start_date, end_date, timeout=deadline
                )
        except DB_ERRORS as exc:
            raise self._failure(op, exc, user_id=user_id) from exc

        worklogs = [_row_to_worklog(row) for row in rows]
        self._log.debug("worklogs retrieved successfully", extra={"op": op, "count": len(worklogs)})
        return worklogs


__all__ = ["PostgresWorklogStore"]
