"""Structured logging configuration with request correlation."""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = ("X-Request-ID", "X-Correlation-ID")
ACCESS_LOGGER = "gallery.access"

# ``extra=`` keys promoted to top-level JSON fields
EXTRA_KEYS = (
    "endpoint",
    "elapsed_ms",
    "method",
    "path",
    "status",
    "user_id",
    "file_name",
    "object_key",
    "count",
)


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON objects.

    Only the keys listed in :data:`EXTRA_KEYS` are copied from ``extra=``;
    anything else passed that way stays off the wire.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "name": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update({key: getattr(record, key) for key in EXTRA_KEYS if hasattr(record, key)})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on every record.

    Inside a request (or a thread running a copy of its context) the current
    id wins. Elsewhere an explicit ``extra={"request_id": ...}`` is kept and
    missing ids become ``None``.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            record.request_id = ensure_request_id()
        elif not hasattr(record, "request_id"):
            record.request_id = None
        return True


def ensure_request_id() -> str:
    """Return the current request identifier, generating one when necessary.

    Incoming ``X-Request-ID`` / ``X-Correlation-ID`` headers are honoured.
    Outside a request context a throwaway UUID4 is returned.
    """

    if not has_request_context():
        return str(uuid4())
    current = g.get("request_id")
    if current:
        return str(current)
    incoming = next(
        (request.headers[h] for h in CORRELATION_HEADERS if request.headers.get(h)), None
    )
    g.request_id = incoming or str(uuid4())
    return str(g.request_id)


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str | int = "INFO") -> None:
    """Send every record to stdout as JSON, tagged with the request id."""

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_resolve_level(level))
    # The Google SDK logs every HTTP retry at INFO
    logging.getLogger("google").setLevel(max(logging.WARNING, root.level))


def init_app(app: Flask) -> None:
    """Correlate requests and emit one access-log line per response.

    The access line carries method, path, status and latency; ``user_id`` is
    added when a guard stored the authenticated principal on ``g``.
    """

    app.logger.addFilter(RequestIdFilter())
    access_log = logging.getLogger(ACCESS_LOGGER)

    @app.before_request
    def _start_request() -> None:
        # ``g`` is shared with any app context pushed before the request
        g.pop("request_id", None)
        g.pop("user_id", None)
        ensure_request_id()
        g.request_started = time.perf_counter()

    @app.after_request
    def _finish_request(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        started = g.get("request_started")
        extra: dict[str, Any] = {
            "method": request.method,
            "path": request.path,
            "status": response.status_code,
        }
        if started is not None:
            extra["elapsed_ms"] = round((time.perf_counter() - started) * 1000, 2)
        if g.get("user_id"):
            extra["user_id"] = g.user_id
        access_log.info("request.completed", extra=extra)
        return response


__all__ = ["configure_logging", "init_app", "ensure_request_id", "JSONFormatter", "RequestIdFilter"]
