"""
SQLAlchemy Units of Work over the Flask-scoped session.

Both flavours expose the ``users`` and ``images`` repositories bound to one
session. The read-write flavour commits on success; the read-only flavour
never commits and refuses writes for as long as it is open.
"""

from __future__ import annotations

import logging
from contextlib import suppress
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from gallery.core.extensions import db
from gallery.repositories import ImageRepository, UserRepository
from gallery.uow.base import UnitOfWork

log = logging.getLogger(__name__)

WRITE_KEYWORDS = frozenset(
    {
        "insert",
        "update",
        "delete",
        "merge",
        "replace",
        "create",
        "alter",
        "drop",
        "truncate",
        "grant",
        "revoke",
    }
)
ISOLATION_LEVELS = frozenset(
    {"READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE", "READ UNCOMMITTED"}
)
READ_ONLY_DIALECTS = frozenset({"postgresql", "mysql", "mariadb"})


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.images = ImageRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write UoW over the Flask-scoped session.

    Commits on a clean exit, rolls back when the block raises.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session autobegins on first use
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class _WriteGuard:
    """
    Event listeners rejecting writes on one session and its connection.

    ORM flushes carrying pending changes and SQL statements whose first
    keyword is in :data:`WRITE_KEYWORDS` raise ``RuntimeError``. Each guard
    registers its own listener functions so removing one guard never
    unhooks another.
    """

    def __init__(self, session: Session, target: Connection | Any) -> None:
        self.session = session
        self.target = target
        self._hooks: tuple[Any, Any] | None = None

    def install(self) -> None:
        if self._hooks is not None:
            return

        def before_flush(session, flush_context, instances):
            if session.new or session.dirty or session.deleted:
                raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")

        def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            words = statement.split(None, 1) if statement else []
            keyword = words[0].lower() if words else ""
            if keyword in WRITE_KEYWORDS:
                raise RuntimeError(
                    f"Read-only UnitOfWork: SQL statement blocked: {keyword.upper()}"
                )

        event.listen(self.session, "before_flush", before_flush)
        event.listen(self.target, "before_cursor_execute", before_cursor_execute)
        self._hooks = (before_flush, before_cursor_execute)

    def remove(self) -> None:
        if self._hooks is None:
            return
        before_flush, before_cursor_execute = self._hooks
        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", before_flush)
        with suppress(InvalidRequestError):
            event.remove(self.target, "before_cursor_execute", before_cursor_execute)
        self._hooks = None


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work backed by the Flask-scoped SQLAlchemy session.

    On enter it tries to own a fresh transaction so it can issue
    ``SET TRANSACTION`` directives (isolation, ``READ ONLY`` on PostgreSQL and
    MySQL). When a transaction is already running (test SAVEPOINT fixtures,
    autobegin) it attaches to it instead. In both cases writes are refused by
    a :class:`_WriteGuard` until exit; an owned transaction is rolled back.

    Parameters
    ----------
    isolation_level:
        Optional isolation level hint, e.g. ``"READ COMMITTED"``.
    enforce_db_readonly:
        Apply ``SET TRANSACTION READ ONLY`` where the dialect supports it.
    """

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(session=db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._owned: SessionTransaction | None = None
        self._guard: _WriteGuard | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        try:
            self._owned = self.session.begin()
        except InvalidRequestError:
            # Already inside a transaction: attach, guards only
            self._owned = None

        conn = self.session.connection()
        if self._owned is not None:
            self._apply_directives(conn.dialect.name)
        self._guard = _WriteGuard(self.session, conn)
        self._guard.install()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owned is not None:
                self.session.rollback()
        finally:
            self._owned = None
            if self._guard is not None:
                self._guard.remove()
                self._guard = None

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    def _apply_directives(self, dialect: str) -> None:
        """Issue ``SET TRANSACTION`` statements; SQLite has none."""
        if dialect == "sqlite":
            return
        try:
            if self.isolation_level:
                level = self.isolation_level.upper().strip()
                if level not in ISOLATION_LEVELS:
                    log.warning("Unknown isolation level %r; trying as-is.", level)
                self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {level}"))
            if self.enforce_db_readonly and dialect in READ_ONLY_DIALECTS:
                self.session.execute(text("SET TRANSACTION READ ONLY"))
        except SQLAlchemyError as exc:
            log.warning("SET TRANSACTION failed (%s); guards only.", exc)
