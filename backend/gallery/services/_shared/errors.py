"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask, HTTP, or
SQLAlchemy. They are the stable contract between repositories, adapters and
application services.

The translation to HTTP responses (RFC 7807) is handled by
``gallery/core/errors.py``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - Anything deriving from this class is a domain outcome and crosses the
      workflow boundary unchanged; every other exception is wrapped into
      :class:`InternalError`.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found (or not visible to the caller).

    :param entity: Entity name (e.g., "Image").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class UnauthorizedError(ServiceError):
    """Raised when credentials or tokens do not authenticate the caller."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class InvalidTokenError(UnauthorizedError):
    """Raised for tampered, malformed or wrongly-typed tokens."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class TokenExpiredError(UnauthorizedError):
    """Raised when a token's ``exp`` claim lies in the past."""

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message)


class BadRequestError(ServiceError):
    """
    Raised when caller input is unusable (missing file, bad type, too large).

    :param message: Summary of the failure.
    :type message: str
    :param errors: One entry per individual violation, in input order.
    :type errors: Sequence[str] | None
    """

    def __init__(self, message: str, errors: Sequence[str] | None = None) -> None:
        super().__init__(message)
        self.errors: list[str] = list(errors or [])


class InternalError(ServiceError):
    """
    Generic failure signal for unexpected adapter/database/signing errors.

    The message is safe for clients; the original exception is chained as
    ``__cause__`` and logged where it was caught.
    """

    def __init__(self, message: str = "An unexpected error occurred.") -> None:
        super().__init__(message)
