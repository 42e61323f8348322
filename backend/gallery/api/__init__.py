"""API blueprint package."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Register related blueprints beneath a common prefix.

    Parameters
    ----------
    app:
        Application instance receiving the blueprints.
    base_prefix:
        Prefix applied to all entries (``API_BASE_PREFIX``); may be empty.
    entries:
        Iterable of ``(blueprint, relative_prefix)`` pairs where
        ``relative_prefix`` is appended to ``base_prefix``.

    Notes
    -----
    When both parts are empty the blueprint is mounted at the root.
    """

    for bp, rel_prefix in entries:
        segments = [base_prefix.strip("/"), rel_prefix.strip("/")]
        joined = "/".join(segment for segment in segments if segment)
        app.register_blueprint(bp, url_prefix=f"/{joined}" if joined else None)


def init_app(app: Flask) -> None:
    """Mount every route blueprint under ``API_BASE_PREFIX``."""

    from gallery.api.routes import REGISTRY

    register_blueprint_group(
        app, base_prefix=str(app.config.get("API_BASE_PREFIX") or ""), entries=REGISTRY
    )


__all__ = ["init_app", "register_blueprint_group"]
