"""Centralized JSON (RFC 7807) error handling for the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from gallery.core.extensions import jwt
from gallery.core.logger import ensure_request_id
from gallery.services._shared.errors import (
    BadRequestError,
    ConflictError,
    InternalError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
)

log = logging.getLogger(__name__)


def _http_status_to_code(status_code: int) -> str:
    """Map common HTTP status codes to canonical, stable error codes."""
    mapping = {
        400: "bad_request",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        409: "conflict",
        413: "payload_too_large",
        415: "unsupported_media_type",
        422: "unprocessable_entity",
        429: "too_many_requests",
        500: "internal_server_error",
        503: "service_unavailable",
    }
    return mapping.get(status_code, "error")


def _as_problem(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build an RFC 7807 Problem Details dict.

    :param status: HTTP status code.
    :param code: Stable machine-consumable error code.
    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details.
    :returns: Problem+JSON dictionary.
    :rtype: dict
    """
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
    }
    if details:
        problem["details"] = details
    problem["request_id"] = ensure_request_id()
    return problem


def _problem_response(problem: dict[str, Any], status: int) -> tuple[Response, int]:
    """
    Return a Flask response with ``application/problem+json`` media type.

    :param problem: Problem details payload.
    :param status: HTTP status code.
    :returns: Response and status tuple.
    """
    resp = jsonify(problem)
    resp.mimetype = "application/problem+json"
    return resp, status


class APIError(Exception):
    """
    Represent a JSON-serializable API error.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier, typically snake_case. Defaults to
        ``"bad_request"``.
    details : dict[str, Any] | None, optional
        Optional structured payload (e.g., validation messages) included in the
        response body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}

    def to_problem(self) -> dict[str, Any]:
        """
        Serialize error metadata into an RFC 7807 problem.

        :returns: Problem details dictionary.
        :rtype: dict
        """
        return _as_problem(
            status=self.status_code,
            code=self.code,
            message=self.message,
            details=self.details or None,
        )


def translate_service_error(exc: ServiceError) -> APIError:
    """
    Map a service-layer error onto its HTTP representation.

    :param exc: Error raised by a workflow.
    :returns: API error carrying status, code and client-safe message.
    """
    if isinstance(exc, NotFoundError):
        return APIError(str(exc), HTTPStatus.NOT_FOUND, "not_found")
    if isinstance(exc, ConflictError):
        return APIError(str(exc), HTTPStatus.CONFLICT, "conflict")
    if isinstance(exc, UnauthorizedError):
        return APIError(str(exc), HTTPStatus.UNAUTHORIZED, "unauthorized")
    if isinstance(exc, BadRequestError):
        details = {"errors": list(exc.errors)} if exc.errors else None
        return APIError(str(exc), HTTPStatus.BAD_REQUEST, "bad_request", details)
    if isinstance(exc, InternalError):
        return APIError(str(exc), HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error")
    return APIError(str(exc), HTTPStatus.BAD_REQUEST, "bad_request")


def _token_problem(message: str) -> tuple[Response, int]:
    problem = _as_problem(status=HTTPStatus.UNAUTHORIZED, code="unauthorized", message=message)
    log.warning("TokenError: msg=%s request_id=%s", message, problem.get("request_id"))
    return _problem_response(problem, HTTPStatus.UNAUTHORIZED)


@jwt.unauthorized_loader
def _missing_token(reason: str):
    return _token_problem(reason)


@jwt.invalid_token_loader
def _invalid_token(reason: str):
    return _token_problem(reason)


@jwt.expired_token_loader
def _expired_token(jwt_header: dict[str, Any], jwt_payload: dict[str, Any]):
    return _token_problem("Token has expired")


# Exceptions answered with a fixed problem; the raw error never reaches clients
_FIXED_PROBLEMS: tuple[tuple[type[Exception], HTTPStatus, str, str], ...] = (
    (IntegrityError, HTTPStatus.CONFLICT, "conflict", "Resource conflict"),
    (
        OperationalError,
        HTTPStatus.SERVICE_UNAVAILABLE,
        "service_unavailable",
        "Service temporarily unavailable",
    ),
    (Exception, HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error"),
)


def _register_fixed_problem(
    app: Flask, exc_type: type[Exception], status: HTTPStatus, code: str, message: str
) -> None:
    def handler(err: Exception):
        problem = _as_problem(status=status, code=code, message=message)
        log.error(
            "%s: request_id=%s", type(err).__name__, problem.get("request_id"), exc_info=err
        )
        return _problem_response(problem, status)

    app.register_error_handler(exc_type, handler)


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Every handled error is rendered as ``application/problem+json``.
    - 5xx are logged with the traceback; 4xx as warnings without one.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        problem = err.to_problem()
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: code=%s status=%s msg=%s request_id=%s",
            err.code,
            err.status_code,
            err.message,
            problem.get("request_id"),
        )
        return _problem_response(problem, err.status_code)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        # Internal detail was already logged at the workflow boundary
        return handle_api_error(translate_service_error(err))

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = _http_status_to_code(status)
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or code.replace("_", " ").capitalize()).strip()
        return handle_api_error(APIError(message, status, code))

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        details = {"errors": err.messages}
        error = APIError(
            "Validation failed", HTTPStatus.UNPROCESSABLE_ENTITY, "validation_error", details
        )
        return handle_api_error(error)

    for exc_type, status, code, message in _FIXED_PROBLEMS:
        _register_fixed_problem(app, exc_type, status, code, message)
