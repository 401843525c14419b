"""
Apply the schema migrations in `db/migrations`.

Files are named `<version>_<name>.up.sql` / `<version>_<name>.down.sql`.
"up" applies every up-script in version order, "down" every down-script in
reverse order, all inside one transaction. Scripts are written to be
re-runnable (`IF NOT EXISTS` / `IF EXISTS`), so no version table is kept.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from tracker.infrastructure.db_factory import get_sync_connection
from tracker.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_MIGRATIONS_DIR = Path("db") / "migrations"
DIRECTIONS = ("up", "down")


def migration_files(directory: Path, direction: str) -> List[Path]:
    if direction not in DIRECTIONS:
        raise ValueError(f"Invalid migrate direction '{direction}'. Use 'up' or 'down'.")
    files = sorted(directory.glob(f"*.{direction}.sql"))
    return list(reversed(files)) if direction == "down" else files


def apply_migrations(
    direction: str,
    directory: Path = DEFAULT_MIGRATIONS_DIR,
    dsn: Optional[str] = None,
) -> List[str]:
    """
    Run the migration scripts for `direction` and return their names.
    """
    files = migration_files(directory, direction)
    if not files:
        raise FileNotFoundError(f"no *.{direction}.sql migrations found in {directory}")

    with get_sync_connection(dsn) as conn:
        with conn.cursor() as cur:
            for path in files:
                log.info("applying migration", extra={"migration": path.name})
                cur.execute(path.read_text(encoding="utf-8"))
        conn.commit()

    return [path.name for path in files]


__all__ = ["DEFAULT_MIGRATIONS_DIR", "apply_migrations", "migration_files"]
