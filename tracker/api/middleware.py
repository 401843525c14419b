from __future__ import annotations

import logging
import time
import uuid
from typing import Awaitable, Callable

from fastapi import FastAPI, Request, Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def register_middleware(app: FastAPI) -> None:
    """Attach request-id propagation and per-request access logging."""

    logger.info("logs for http-requests are enabled")

    @app.middleware("http")
    async def request_logging(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "request has been processed",
            extra={
                "method": request.method,
                "path": request.url.path,
                "remote_addr": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent", ""),
                "request_id": request_id,
                "status": response.status_code,
                "size": response.headers.get("content-length", "0") + " bytes",
                "duration": f"{(time.perf_counter() - started) * 1000:.2f}ms",
            },
        )
        return response
