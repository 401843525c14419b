"""
PostgreSQL-backed user store.

Listing and partial updates go through the builders in
`tracker.stores.queries`; inserts and deletes use fixed statements. Every
mutation inspects `RETURNING id` to tell "no such row" apart from success.
"""

from __future__ import annotations

from typing import List, Optional

import asyncpg

from tracker.domain.errors import PassportDuplicateError, UserNotFoundError
from tracker.domain.models import FilterBy, Pagination, Passport, People, User
from tracker.stores.base import DB_ERRORS, PostgresStore
from tracker.stores.queries import build_update_user_query, build_users_query

INSERT_USER_SQL = """
    INSERT INTO users (passport_serie, passport_number, name, surname, patronymic, address, created_at, updated_at)
    VALUES ($1, $2, $3, $4, $5, $6, NOW(), NOW())
    RETURNING id
"""

DELETE_USER_SQL = "DELETE FROM users WHERE id = $1 RETURNING id"


def _row_to_user(row: asyncpg.Record) -> User:
    return User(
        id=row["id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        passport=Passport(serie=row["passport_serie"], number=row["passport_number"]),
        people=People(
            name=row["name"],
            surname=row["surname"],
            patronymic=row["patronymic"] or "",
            address=row["address"] or "",
        ),
    )


class PostgresUserStore(PostgresStore):
    """User CRUD over the `users` table."""

    async def create_user(self, user: User, timeout: Optional[float] = None) -> int:
        op = "users.create_user"
        deadline = self._deadline(timeout)
        self._log.debug("executing query", extra={"op": op, "query": INSERT_USER_SQL})
        try:
            async with self._pool.acquire(timeout=deadline) as conn:
                user_id = await conn.fetchval(
                    INSERT_USER_SQL,
                    user.passport.serie,
                    user.passport.number,
                    user.people.name,
                    user.people.surname,
                    user.people.patronymic,
                    user.people.address,
                    timeout=deadline,
                )
        except asyncpg.UniqueViolationError as exc:
            self._log.warning(
                "user with such serie and number already exists",
                extra={"op": op, "passport_serie": user.passport.serie},
            )
            raise PassportDuplicateError(op=op) from exc
        except DB_ERRORS as exc:
            raise self._failure(op, exc) from exc

        self._log.debug("successfully created user", extra={"op": op, "user_id": user_id})
        return user_id

    async def users(
        self,
        filter_by: FilterBy,
        pagination: Pagination,
        timeout: Optional[float] = None,
    ) -> List[User]:
        op = "users.users"
        deadline = self._deadline(timeout)
        query, args = build_users_query(filter_by, pagination)
        self._log.debug("executing query", extra={"op": op, "query": query, "query_args": args})
        try:
            async with self._pool.acquire(timeout=deadline) as conn:
                rows = await conn.fetch(query, *args, timeout=deadline)
        except DB_ERRORS as exc:
            raise self._failure(op, exc) from exc

        users = [_row_to_user(row) for row in rows]
        self._log.debug("successfully retrieved users", extra={"op": op, "count": len(users)})
        return users

    async def update_user(self, user: User, timeout: Optional[float] = None) -> None:
        op = "users.update_user"
        deadline = self._deadline(timeout)
        query, args = build_update_user_query(user)
        self._log.debug("executing query", extra={"op": op, "query": query, "query_args": args})
        try:
            async with self._pool.acquire(timeout=deadline) as conn:
                updated_id = await conn.fetchval(query, *args, timeout=deadline)
        except asyncpg.UniqueViolationError as exc:
            self._log.warning(
                "user with such serie and number already exists",
                extra={"op": op, "user_id": user.id},
            )
            raise PassportDuplicateError(op=op) from exc
        except DB_ERRORS as exc:
            raise self._failure(op, exc, user_id=user.id) from exc

        if updated_id is None:
            raise UserNotFoundError(f"user {user.id} not found", op=op)
        self._log.debug("successfully updated user", extra={"op": op, "user_id": user.id})

    async def delete_user(self, user_id: int, timeout: Optional[float] = None) -> None:
        op = "users.delete_user"
        deadline = self._deadline(timeout)
        self._log.debug("executing query", extra={"op": op, "query": DELETE_USER_SQL})
        try:
            async with self._pool.acquire(timeout=deadline) as conn:
                deleted_id = await conn.fetchval(
                    DELETE_USER_SQL, user_id, timeout=deadline
                )
        except DB_ERRORS as exc:
            raise self._failure(op, exc, user_id=user_id) from exc

        if deleted_id is None:
            raise UserNotFoundError(f"user {user_id} not found", op=op)
        self._log.debug("successfully deleted user", extra={"op": op, "user_id": user_id})


__all__ = ["PostgresUserStore"]
