"""Expose the application factory at package level.

``from gallery import create_app`` is the supported entry point, including
for ``flask --app gallery`` and gunicorn (``gallery:create_app()``).
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
