from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from rich import box
from rich.console import Console
from rich.table import Table

from tracker.api.app import create_application
from tracker.config import get_settings
from tracker.infrastructure.migrations import DEFAULT_MIGRATIONS_DIR, apply_migrations
from tracker.infrastructure.people_stub import run_stub
from tracker.utils.logging import configure_for_env

app = typer.Typer(help="Time Tracker CLI.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    table = Table(title="Time Tracker configuration", box=box.SIMPLE)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("env", settings.app_env)
    table.add_row("database", f"{settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name}")
    table.add_row("pool", f"min={settings.db_pool_min_size} max={settings.db_pool_max_size}")
    table.add_row("server", f"{settings.server_host}:{settings.server_port}")
    table.add_row("people api", settings.external_api_base_url)
    Console().print(table)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default from settings)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port (default from settings)."),
) -> None:
    """
    Run the HTTP API.
    """
    settings = get_settings()
    configure_for_env(settings.app_env, settings.log_level)
    uvicorn.run(
        create_application(settings),
        host=host or settings.server_host,
        port=port or settings.server_port,
        log_config=None,
        timeout_keep_alive=int(settings.idle_timeout),
        timeout_graceful_shutdown=int(settings.shutdown_grace_period),
    )


@app.command("lookup-stub")
def lookup_stub(
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port (default EXTERNAL_API_PORT)."),
) -> None:
    """
    Run the local people-info stub service.
    """
    settings = get_settings()
    configure_for_env(settings.app_env, settings.log_level)
    bind_port = port or settings.external_api_port
    typer.echo(f"external server is running on port: {bind_port}")
    run_stub(settings.external_api_host, bind_port)


@app.command()
def migrate(
    direction: str = typer.Argument(..., help="'up' or 'down'."),
    path: Path = typer.Option(DEFAULT_MIGRATIONS_DIR, "--path", help="Migrations directory."),
) -> None:
    """
    Apply or revert the database schema.
    """
    settings = get_settings()
    configure_for_env(settings.app_env, settings.log_level)
    try:
        applied = apply_migrations(direction, path)
    except (ValueError, FileNotFoundError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)
    typer.echo(f"Migrations applied successfully: {', '.join(applied)}")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
