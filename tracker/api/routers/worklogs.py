"""API router for starting, finishing and listing worklogs."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Path, Query, Response, status

from tracker.api.dependencies import get_worklog_store
from tracker.api.schemas import (
    MAX_ID,
    ErrorResponse,
    StartWorklogRequest,
    StartWorklogResponse,
    WorklogResponse,
)
from tracker.stores.abstract import WorklogStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["worklogs"])


@router.get(
    "/users/{user_id}/worklogs",
    response_model=List[WorklogResponse],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def list_worklogs(
    user_id: int = Path(..., ge=1, le=MAX_ID),
    start_date: datetime = Query(..., description="ISO 8601, e.g. 2024-01-01T00:00:00Z"),
    end_date: datetime = Query(..., description="ISO 8601, e.g. 2024-01-31T23:59:59Z"),
    worklog_store: WorklogStore = Depends(get_worklog_store),
) -> List[WorklogResponse]:
    """
    Worklogs of a user started on/after `start_date` and finished on/before
    `end_date` (open worklogs are always included), longest first.
    """
    worklogs = await worklog_store.worklogs(user_id, start_date, end_date)

    logger.info(
        "worklogs retrieved successfully",
        extra={"handler": "Worklogs", "user_id": user_id, "count": len(worklogs)},
    )
    return [WorklogResponse.from_worklog(worklog) for worklog in worklogs]


@router.post(
    "/worklogs/start",
    response_model=StartWorklogResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def start_worklog(
    request: StartWorklogRequest,
    worklog_store: WorklogStore = Depends(get_worklog_store),
) -> StartWorklogResponse:
    """Open a new worklog for a user."""
    worklog_id = await worklog_store.start_worklog(request.task, request.user_id)

    logger.info(
        "worklog started successfully",
        extra={"handler": "StartWorklog", "worklog_id": worklog_id},
    )
    return StartWorklogResponse(worklog_id=worklog_id)


@router.patch(
    "/worklogs/finish/{worklog_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def finish_worklog(
    worklog_id: int = Path(..., ge=1, le=MAX_ID),
    worklog_store: WorklogStore = Depends(get_worklog_store),
) -> Response:
    """Close an open worklog; a second attempt yields 409."""
    await worklog_store.finish_worklog(worklog_id)

    logger.info(
        "worklog finished successfully",
        extra={"handler": "FinishWorklog", "worklog_id": worklog_id},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
