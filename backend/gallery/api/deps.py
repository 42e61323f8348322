"""Shared API helpers: auth guards, service wiring and response helpers."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request
from flask_jwt_extended import get_jwt, verify_jwt_in_request
from werkzeug.datastructures import FileStorage

from gallery.core.extensions import get_object_storage
from gallery.infra.jwt.token_service import JWTTokenService
from gallery.services._shared.ports.token_provider import JwtPayload
from gallery.services.auth.service import AuthService
from gallery.services.files.dto import FileIn
from gallery.services.files.service import FileService
from gallery.services.images.service import DEFAULT_MAX_WORKERS, ImageService

F = TypeVar("F", bound=Callable[..., Any])


# --------------------------------------------------------------------------- #
# Authentication guards
# --------------------------------------------------------------------------- #


def _bearer_token() -> str:
    header = request.headers.get(current_app.config.get("JWT_HEADER_NAME", "Authorization"), "")
    parts = header.split(None, 1)
    return parts[1].strip() if len(parts) == 2 else ""


def current_principal() -> JwtPayload:
    """Build the typed principal from the token verified for this request."""
    claims = get_jwt()
    return JwtPayload(
        user_id=str(claims["sub"]),
        token_type=str(claims.get("type", "access")),
        jti=str(claims.get("jti") or ""),
        issued_at=datetime.fromtimestamp(int(claims["iat"]), tz=UTC),
        expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=UTC),
        token=_bearer_token(),
    )


def _guard(*, refresh: bool) -> Callable[[F], F]:
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            verify_jwt_in_request(optional=False, refresh=refresh)
            principal = current_principal()
            g.user_id = principal.user_id
            kwargs["principal"] = principal
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def require_auth(func: F) -> F:
    """Require a valid access token and pass it as ``principal=JwtPayload``."""
    return _guard(refresh=False)(func)


def require_refresh(func: F) -> F:
    """Require a valid refresh token and pass it as ``principal=JwtPayload``."""
    return _guard(refresh=True)(func)


# --------------------------------------------------------------------------- #
# Service wiring
# --------------------------------------------------------------------------- #


def get_token_service() -> JWTTokenService:
    return JWTTokenService.from_config(current_app.config)


def get_auth_service() -> AuthService:
    return AuthService(tokens=get_token_service())


def get_file_service() -> FileService:
    return FileService(storage=get_object_storage())


def get_image_service() -> ImageService:
    max_workers = int(current_app.config.get("UPLOAD_MAX_WORKERS", DEFAULT_MAX_WORKERS))
    return ImageService(files=get_file_service(), max_workers=max_workers)


# --------------------------------------------------------------------------- #
# Request / response helpers
# --------------------------------------------------------------------------- #


def read_upload(storage: FileStorage | None) -> FileIn | None:
    """Read a multipart part into memory; ``None`` when absent or unnamed."""
    if storage is None or not storage.filename:
        return None
    return FileIn(
        filename=storage.filename,
        content_type=storage.mimetype or "application/octet-stream",
        data=storage.read(),
    )


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
