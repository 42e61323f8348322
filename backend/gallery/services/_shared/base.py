"""Base class and helpers shared by application services."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from gallery.repositories.base import Pagination
from gallery.services._shared.errors import InternalError, ServiceError
from gallery.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

log = logging.getLogger(__name__)

DEFAULT_PAGE_NUMBER = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
# Keeps the computed offset inside a signed 32-bit integer
MAX_PAGE_NUMBER = 2**31 // MAX_PAGE_SIZE


def _as_number(value: Any) -> float | None:
    """Coerce ``value`` to a finite float, or ``None`` when impossible."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Wrap workflows in an error boundary (:meth:`boundary`).
    * Offer shared input sanitization (pagination).

    Notes
    -----
    - Services never touch the global session; they always use a Unit of Work.
    - Collaborators (token provider, storage, ...) arrive through ``__init__``.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level.
        :type isolation: str | None
        :param enforce_db_readonly: Apply ``SET TRANSACTION READ ONLY`` when supported.
        :type enforce_db_readonly: bool
        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    # -------------------------- Error boundary ------------------------------

    @contextmanager
    def boundary(self, operation: str, message: str | None = None) -> Iterator[None]:
        """
        Run a workflow step, passing domain errors through untouched.

        Any exception that is not a :class:`ServiceError` is logged with its
        traceback and re-raised as :class:`InternalError` carrying ``message``
        (no internal detail).

        :param operation: Name used in the log line (e.g. ``"auth.login"``).
        :type operation: str
        :param message: Client-safe message of the resulting ``InternalError``.
        :type message: str | None
        :raises ServiceError: Unchanged domain errors.
        :raises InternalError: For everything else.
        """
        try:
            yield
        except ServiceError:
            raise
        except Exception as exc:
            log.error("%s failed: %s", operation, exc.__class__.__name__, exc_info=True)
            raise InternalError(message or "An unexpected error occurred.") from exc

    # ----------------------- Validation utilities ---------------------------

    def ensure_pagination(self, *, page_number: Any = None, page_size: Any = None) -> Pagination:
        """
        Sanitize raw pagination input.

        * Page number: non-numeric or non-finite -> 1, else ``floor(n)`` clamped
          into ``[1, MAX_PAGE_NUMBER]``.
        * Page size: non-numeric or non-finite -> 20, else ``floor(n)`` clamped
          into ``[1, 100]``.

        :param page_number: Raw page number (int, float, numeric string or ``None``).
        :param page_size: Raw page size (int, float, numeric string or ``None``).
        :returns: Sanitized pagination.
        :rtype: Pagination
        """
        page = _as_number(page_number)
        size = _as_number(page_size)
        sanitized_page = (
            DEFAULT_PAGE_NUMBER if page is None else min(MAX_PAGE_NUMBER, max(1, math.floor(page)))
        )
        sanitized_size = (
            DEFAULT_PAGE_SIZE if size is None else min(MAX_PAGE_SIZE, max(1, math.floor(size)))
        )
        return Pagination(page=sanitized_page, limit=sanitized_size)
