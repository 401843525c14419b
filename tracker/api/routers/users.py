"""API router for user management."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from tracker.api.dependencies import (
    get_people_lookup,
    get_request_id,
    get_user_store,
)
from tracker.api.schemas import (
    MAX_BIGINT,
    MAX_ID,
    CreateUserRequest,
    CreateUserResponse,
    ErrorResponse,
    UpdateUserRequest,
    UserResponse,
    UsersResponse,
)
from tracker.domain.models import FilterBy, Pagination, User
from tracker.domain.passport import parse_passport
from tracker.stores.abstract import PeopleLookup, UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

_ERRORS = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get("", response_model=UsersResponse, responses=_ERRORS)
async def list_users(
    name: str = "",
    surname: str = "",
    patronymic: str = "",
    address: str = "",
    serie: str = Query("", description="Passport series."),
    number: str = Query("", description="Passport number."),
    created_after: Optional[datetime] = None,
    created_before: Optional[datetime] = None,
    limit: int = Query(0, ge=0, le=MAX_BIGINT, description="0 means no limit."),
    offset: int = Query(0, ge=0, le=MAX_BIGINT),
    user_store: UserStore = Depends(get_user_store),
    request_id: str = Depends(get_request_id),
) -> UsersResponse:
    """Retrieve users with optional exact-match filtering and pagination."""
    filter_by = FilterBy(
        name=name,
        surname=surname,
        patronymic=patronymic,
        address=address,
        passport_serie=serie,
        passport_number=number,
        created_after=created_after,
        created_before=created_before,
    )
    pagination = Pagination(limit=limit, offset=offset)
    logger.debug(
        "received request",
        extra={
            "handler": "Users",
            "request_id": request_id,
            "filter": filter_by.model_dump(mode="json"),
            "pagination": pagination.model_dump(),
        },
    )

    users = await user_store.users(filter_by, pagination)

    logger.info("fetched users", extra={"handler": "Users", "count": len(users)})
    return UsersResponse(users=[UserResponse.from_user(user) for user in users])


@router.post(
    "",
    response_model=CreateUserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_ERRORS, 409: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def create_user(
    request: CreateUserRequest,
    user_store: UserStore = Depends(get_user_store),
    people_lookup: PeopleLookup = Depends(get_people_lookup),
    request_id: str = Depends(get_request_id),
) -> CreateUserResponse:
    """Create a user from passport data, enriched through the people-info service."""
    passport = parse_passport(request.passportNumber)
    people = await people_lookup.lookup(passport.serie, passport.number)
    logger.debug(
        "fetched people info",
        extra={"handler": "CreateUser", "request_id": request_id, "people": people.model_dump()},
    )

    user_id = await user_store.create_user(User(passport=passport, people=people))

    logger.info("created user", extra={"handler": "CreateUser", "user_id": user_id})
    return CreateUserResponse(user_id=user_id)


@router.patch(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_ERRORS, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_user(
    request: UpdateUserRequest,
    user_id: int = Path(..., ge=1, le=MAX_ID),
    user_store: UserStore = Depends(get_user_store),
) -> Response:
    """Update the supplied (non-empty) fields of a user."""
    await user_store.update_user(request.to_user(user_id))

    logger.info("updated user", extra={"handler": "UpdateUser", "user_id": user_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_ERRORS, 404: {"model": ErrorResponse}},
)
async def delete_user(
    user_id: int = Path(..., ge=1, le=MAX_ID),
    user_store: UserStore = Depends(get_user_store),
) -> Response:
    """Delete a user by ID."""
    await user_store.delete_user(user_id)

    logger.info("deleted user", extra={"handler": "DeleteUser", "user_id": user_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
