"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .db import gallery_cli


def init_app(app: Flask) -> None:
    """Register the ``flask gallery ...`` command group."""
    app.cli.add_command(gallery_cli)
