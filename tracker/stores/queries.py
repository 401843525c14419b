"""
SQL builders for user listing and partial updates.

Both builders collect (fragment, values) clauses first and number the
`$n` placeholders in a single rendering pass, so the query text and the
argument list always agree in order and count. No I/O happens here.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Sequence, Tuple

from tracker.domain.models import FilterBy, Pagination, User

# A SQL fragment with one "{}" per value, and the values bound to it.
Clause = Tuple[str, Tuple[Any, ...]]

USER_COLUMNS = (
    "id, created_at, updated_at, passport_serie, passport_number, "
    "name, surname, patronymic, address"
)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC; aware ones pass through."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _render(clauses: Sequence[Clause]) -> Tuple[List[str], List[Any]]:
    """Number placeholders by final position and collect arguments alongside."""
    fragments: List[str] = []
    args: List[Any] = []
    for fragment, values in clauses:
        placeholders = [f"${len(args) + i + 1}" for i in range(len(values))]
        fragments.append(fragment.format(*placeholders))
        args.extend(values)
    return fragments, args


def _user_filter_clauses(filter_by: FilterBy) -> List[Clause]:
    string_fields = {
        "name": filter_by.name,
        "surname": filter_by.surname,
        "patronymic": filter_by.patronymic,
        "address": filter_by.address,
        "passport_serie": filter_by.passport_serie,
        "passport_number": filter_by.passport_number,
    }
    clauses: List[Clause] = [
        (f"AND {column} = {{}}", (value,)) for column, value in string_fields.items() if value
    ]
    if filter_by.created_after is not None:
        clauses.append(("AND created_at > {}", (as_utc(filter_by.created_after),)))
    if filter_by.created_before is not None:
        clauses.append(("AND created_at < {}", (as_utc(filter_by.created_before),)))
    return clauses


def build_users_query(filter_by: FilterBy, pagination: Pagination) -> Tuple[str, List[Any]]:
    """
    Build the user listing query.

    Every non-empty filter field becomes an exact-match predicate, the
    creation window is exclusive on both ends, and LIMIT/OFFSET are only
    emitted for positive values.

    Returns
    -------
    tuple[str, list]
        Query text with `$1..$n` placeholders and the matching arguments.
    """
    clauses: List[Clause] = [(f"SELECT {USER_COLUMNS} FROM users WHERE 1=1", ())]
    clauses.extend(_user_filter_clauses(filter_by))
    clauses.append(("ORDER BY id", ()))
    if pagination.limit > 0:
        clauses.append(("LIMIT {}", (pagination.limit,)))
    if pagination.offset > 0:
        clauses.append(("OFFSET {}", (pagination.offset,)))

    fragments, args = _render(clauses)
    return " ".join(fragments), args


def build_update_user_query(user: User) -> Tuple[str, List[Any]]:
    """
    Build a partial UPDATE for `user`.

    Only non-empty fields are set; `updated_at` is always refreshed, so the
    statement is never empty. The user ID is the last argument and the
    statement returns the updated ID so a missing row can be detected.
    """
    candidates = (
        ("passport_serie", user.passport.serie),
        ("passport_number", user.passport.number),
        ("name", user.people.name),
        ("surname", user.people.surname),
        ("patronymic", user.people.patronymic),
        ("address", user.people.address),
    )
    clauses: List[Clause] = [
        (f"{column} = {{}}", (value,)) for column, value in candidates if value
    ]
    clauses.append(("updated_at = NOW()", ()))
    clauses.append(("WHERE id = {}", (user.id,)))

    fragments, args = _render(clauses)
    assignments, where = fragments[:-1], fragments[-1]
    query = f"UPDATE users SET {', '.join(assignments)} {where} RETURNING id"
    return query, args


__all__ = ["USER_COLUMNS", "as_utc", "build_users_query", "build_update_user_query"]
