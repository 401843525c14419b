"""
Shared pytest fixtures for the time tracker.

Unit tests need none of these. Integration tests pull in `db_pool`, which
chains down to a reachable PostgreSQL with the schema migrated and the
tables emptied; when the database cannot be reached the test is skipped.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import AsyncIterator, Iterator

import asyncpg
import psycopg
import pytest
import pytest_asyncio

from tracker.config import Settings
from tracker.infrastructure.migrations import apply_migrations

MIGRATIONS_DIR = Path(__file__).parent.parent / "db" / "migrations"
TRUNCATE_SQL = "TRUNCATE TABLE worklogs, users RESTART IDENTITY CASCADE;"


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Connection settings for the test database, taken from DB_* variables
    with local-postgres defaults.
    """
    return Settings(
        _env_file=None,
        APP_ENV="test",
        DB_HOST=os.getenv("DB_HOST", "localhost"),
        DB_PORT=int(os.getenv("DB_PORT", "5432")),
        DB_USER=os.getenv("DB_USER", "postgres"),
        DB_PASSWORD=os.getenv("DB_PASSWORD", "postgres"),
        DB_NAME=os.getenv("DB_NAME", "time_tracker"),
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    return test_settings.build_dsn()


@pytest.fixture(scope="session")
def migrated_database(test_dsn: str) -> Iterator[psycopg.Connection]:
    """
    Session connection to a database that has every up-migration applied.
    """
    try:
        conn = psycopg.connect(test_dsn, connect_timeout=5)
    except psycopg.OperationalError as exc:
        pytest.skip(f"Database not available for integration tests: {exc}")

    apply_migrations("up", MIGRATIONS_DIR, dsn=test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture
def clean_tables(migrated_database: psycopg.Connection) -> Iterator[None]:
    """Empty users and worklogs around each test."""
    with migrated_database.cursor() as cur:
        cur.execute(TRUNCATE_SQL)
    migrated_database.commit()
    yield
    with migrated_database.cursor() as cur:
        cur.execute(TRUNCATE_SQL)
    migrated_database.commit()


@pytest_asyncio.fixture
async def db_pool(test_dsn: str, clean_tables: None) -> AsyncIterator[asyncpg.Pool]:
    pool = await asyncpg.create_pool(dsn=test_dsn, min_size=1, max_size=5)
    try:
        yield pool
    finally:
        await pool.close()
