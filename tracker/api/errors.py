"""
Mapping from the domain error hierarchy to HTTP responses.

    ValidationError     -> 400 Invalid request.
    NotFoundError       -> 404 Not found.
    ConflictError       -> 409 Conflict.
    PeopleLookupError   -> 502 Bad gateway.
    anything else       -> 500 Internal server error.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tracker.domain.errors import (
    ConflictError,
    NotFoundError,
    PeopleLookupError,
    TrackerError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_TEXT = {
    status.HTTP_400_BAD_REQUEST: "Invalid request.",
    status.HTTP_404_NOT_FOUND: "Not found.",
    status.HTTP_409_CONFLICT: "Conflict.",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "Internal server error.",
    status.HTTP_502_BAD_GATEWAY: "Bad gateway.",
}


def status_for(exc: Exception) -> int:
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, PeopleLookupError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": _STATUS_TEXT[status_code], "error": message},
    )


async def _tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
    status_code = status_for(exc)
    level = logging.ERROR if status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "request failed",
        extra={
            "path": request.url.path,
            "request_id": getattr(request.state, "request_id", None),
            "error": str(exc),
            "status": status_code,
        },
    )
    return error_response(status_code, str(exc))


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    logger.warning(
        "invalid request",
        extra={"path": request.url.path, "error": details},
    )
    return error_response(status.HTTP_400_BAD_REQUEST, details or "invalid request")


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error", extra={"path": request.url.path})
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TrackerError, _tracker_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
