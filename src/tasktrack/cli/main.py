"""Tasktrack CLI — run the server and manage the database.

Usage:
    tasktrack serve                      # Run the API with uvicorn
    tasktrack serve --port 9000 --reload
    tasktrack init-db                    # Create tables (dev; prod uses alembic)
    tasktrack gen-secret                 # Print a value for TASKTRACK_JWT_SECRET
"""

from __future__ import annotations

import asyncio
import secrets
import sys
from typing import Optional

import click
from pydantic import ValidationError

from tasktrack.config import Settings, get_settings


def _load_settings() -> Settings:
    """Load settings or exit with a readable error."""
    try:
        return get_settings()
    except ValidationError as e:
        click.secho("Error: invalid configuration", fg="red", err=True)
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"]) or "settings"
            click.secho(f"  {field}: {err['msg']}", fg="red", err=True)
        sys.exit(1)


@click.group()
@click.version_option(package_name="tasktrack")
def cli():
    """Tasktrack — personal task tracking API."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: TASKTRACK_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: TASKTRACK_PORT)")
@click.option("--reload", is_flag=True, help="Restart on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    settings = _load_settings()
    uvicorn.run(
        "tasktrack.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command("init-db")
def init_db():
    """Create all tables from the ORM models."""
    from tasktrack.db.engine import Database

    settings = _load_settings()

    async def _create() -> None:
        database = Database(settings.database_url, echo=settings.debug)
        try:
            await database.create_all()
        finally:
            await database.dispose()

    asyncio.run(_create())
    click.secho("Tables created.", fg="green")


@cli.command("gen-secret")
@click.option("--bytes", "nbytes", type=int, default=32, show_default=True)
def gen_secret(nbytes: int):
    """Print a random URL-safe secret."""
    click.echo(secrets.token_urlsafe(nbytes))


if __name__ == "__main__":
    cli()
