"""Flask CLI commands for local database management."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from gallery.core.extensions import db

LOGGER = logging.getLogger(__name__)


def _ensure_non_production() -> None:
    """Abort destructive commands when running in production."""
    config = current_app.config
    app_env = str(config.get("APP_ENV", "")).lower()
    if app_env == "production" and not config.get("DEBUG") and not config.get("TESTING"):
        raise click.UsageError("Destructive commands are disabled in production.")


@click.group("gallery")
def gallery_cli() -> None:
    """Gallery maintenance commands."""


@gallery_cli.command("init-db")
@with_appcontext
def init_db_command() -> None:
    """Create all tables that do not exist yet (development helper)."""
    db.create_all()
    LOGGER.info("Database schema ensured")
    click.echo("Database initialized.")


@gallery_cli.command("reset-db")
@click.option("--yes", is_flag=True, help="Skip the destructive confirmation prompt.")
@with_appcontext
def reset_db_command(yes: bool) -> None:
    """Drop and recreate every table."""
    _ensure_non_production()
    if not yes:
        click.confirm("This will DROP all gallery tables. Continue?", abort=True)
    db.session.remove()
    db.drop_all()
    db.create_all()
    LOGGER.info("Database schema recreated")
    click.echo("Database reset.")
