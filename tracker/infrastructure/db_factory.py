"""
Database connection factory utilities for the time tracker.

The service talks to PostgreSQL through an asyncpg pool owned by a
PoolManager; the application lifespan opens it on startup and drains it on
shutdown within a bounded grace period. Migrations use a dedicated
synchronous psycopg connection.

Connection establishment is retried for transient failures using tenacity.
Queries themselves are never retried.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import asyncpg
import psycopg
from psycopg import Connection
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from tracker.config import Settings, get_settings
from tracker.utils.logging import get_logger

log = get_logger(__name__)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((OSError, asyncpg.CannotConnectNowError)),
    reraise=True,
)
async def create_pool(settings: Settings) -> asyncpg.Pool:
    """
    Create the asyncpg pool with automatic retry.

    Retries up to 3 times with exponential backoff while PostgreSQL is
    unreachable or still starting up.
    """
    return await asyncpg.create_pool(
        dsn=settings.build_dsn(),
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        max_inactive_connection_lifetime=settings.db_pool_max_idle_seconds,
        command_timeout=settings.db_command_timeout,
    )


class PoolManager:
    """
    Owns the lifecycle of the shared asyncpg pool.

    Usage
    -----
        manager = PoolManager(settings)
        pool = await manager.open()
        ...
        await manager.close()
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._log = logger or log
        self._pool: Optional[asyncpg.Pool] = None

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("connection pool is not open")
        return self._pool

    async def open(self) -> asyncpg.Pool:
        """Create the pool (idempotent)."""
        if self._pool is None:
            self._log.debug(
                "connection pool settings",
                extra={
                    "min_size": self._settings.db_pool_min_size,
                    "max_size": self._settings.db_pool_max_size,
                    "max_idle_seconds": self._settings.db_pool_max_idle_seconds,
                    "command_timeout": self._settings.db_command_timeout,
                },
            )
            self._pool = await create_pool(self._settings)
            self._log.debug("database connection pool created")
        return self._pool

    async def close(self, grace_period: Optional[float] = None) -> None:
        """
        Close the pool, waiting up to `grace_period` seconds for connections
        in use to be released before terminating them.
        """
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        timeout = self._settings.shutdown_grace_period if grace_period is None else grace_period
        self._log.info("closing db connection pool")
        try:
            await asyncio.wait_for(pool.close(), timeout=timeout)
        except asyncio.TimeoutError:
            self._log.warning(
                "pool did not drain within grace period, terminating",
                extra={"grace_period": timeout},
            )
            pool.terminate()


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: Optional[str] = None) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Used for one-off maintenance work such as applying migrations.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn or get_settings().build_dsn())


__all__ = [
    "PoolManager",
    "create_pool",
    "get_sync_connection",
]
