from __future__ import annotations

import asyncio
import logging
from typing import Optional

import asyncpg

from tracker.domain.errors import StoreError

# Failures that mean "the database round-trip failed", as opposed to
# constraint violations the stores translate into domain errors.
DB_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    asyncio.TimeoutError,
)


class PostgresStore:
    """
    Shared plumbing for the asyncpg-backed stores.

    Parameters
    ----------
    pool : asyncpg.Pool
        Shared connection pool; connections are always released back to it,
        including when the calling task is cancelled.
    timeout : float, optional
        Default deadline in seconds, applied both to waiting for a pooled
        connection and to each statement. None defers to the pool's
        command timeout and waits for a connection indefinitely.
    logger : logging.Logger, optional
        Logger to report through; defaults to the store module's logger.
    """

    def __init__(
        self,
        pool: asyncpg.Pool,
        timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._pool = pool
        self._timeout = timeout
        self._log = logger or logging.getLogger(type(self).__module__)

    def _deadline(self, timeout: Optional[float]) -> Optional[float]:
        return self._timeout if timeout is None else timeout

    def _failure(self, op: str, exc: BaseException, **context: object) -> StoreError:
        self._log.error(
            "failed to execute query",
            extra={"op": op, "error": str(exc), **context},
        )
        return StoreError(str(exc) or type(exc).__name__, op=op)


__all__ = ["DB_ERRORS", "PostgresStore"]
