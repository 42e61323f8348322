"""Generic repository base and query utilities for SQLAlchemy 2.x.

This module centralizes persistence-only concerns shared by all repositories:
- Offset pagination with an optional total count.
- Deterministic ordering (primary-key tiebreaker).
- Whitelisted equality filters.
- No business logic, no commit/rollback; Services own transactions.

Design decisions
----------------
* Repositories stay thin and persistence-focused:
  - They never implement use cases or domain policies.
  - They never call commit/rollback; the Unit of Work does.
* Equality filtering is opt-in per aggregate via ``_filterable_fields``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, and_, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from gallery.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


# ------------------------------- Pagination ----------------------------------


@dataclass(frozen=True, slots=True)
class Pagination:
    """Sanitized pagination input.

    :param page: 1-based page number (``>= 1``).
    :type page: int
    :param limit: Page size (``>= 1``).
    :type limit: int
    """

    page: int
    limit: int

    @property
    def skip(self) -> int:
        """Number of rows to skip before the current page."""
        return (self.page - 1) * self.limit

    @property
    def take(self) -> int:
        """Number of rows in a full page."""
        return self.limit


def paginate_select(
    session: Session,
    stmt: Select[Any],
    *,
    skip: int,
    take: int,
    with_total: bool = True,
) -> tuple[list[Any], int]:
    """Execute a select with ``OFFSET``/``LIMIT`` and an optional total count.

    The statement's ``ORDER BY`` is stripped for the ``COUNT``, so the total
    reflects exactly the filters of ``stmt``.

    :param session: Active SQLAlchemy session.
    :type session: :class:`sqlalchemy.orm.Session`
    :param stmt: Filtered and ordered select.
    :type stmt: :class:`sqlalchemy.sql.Select`
    :param skip: Rows to skip (clamped to ``>= 0``).
    :type skip: int
    :param take: Rows to return (clamped to ``>= 1``).
    :type take: int
    :param with_total: Whether to compute the total row count.
    :type with_total: bool
    :returns: ``(items, total)``; ``total`` is 0 when ``with_total=False``.
    :rtype: tuple[list[Any], int]
    """
    skip = max(int(skip), 0)
    take = max(int(take), 1)

    total = 0
    if with_total:
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = int(session.execute(count_stmt).scalar_one())

    items = list(session.execute(stmt.offset(skip).limit(take)).scalars().all())
    return items, total


# ------------------------------ Base repository ------------------------------


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define ``model`` (the SQLAlchemy mapped class) and MAY
    override ``_filterable_fields`` to whitelist equality filters.

    This class never opens, commits or rolls back transactions.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        Without an explicit session the Flask-scoped ``db.session`` is used.

        :param session: Session shared across the Unit of Work scope.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        """Public key to ORM attribute mapping for equality filters.

        Unknown keys passed to :meth:`find_one` / :meth:`exists` are ignored.
        """
        return {}

    def _apply_equality_filters(
        self,
        stmt: Select[Any],
        filters: Mapping[str, Any] | None,
    ) -> Select[Any]:
        if not filters:
            return stmt
        allowed = self._filterable_fields()
        clauses = [allowed[k] == v for k, v in filters.items() if k in allowed]
        return stmt.where(and_(*clauses)) if clauses else stmt

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush so defaults and the PK materialize.

        :param instance: New entity instance.
        :type instance: E
        :returns: The same instance after ``flush()``.
        :rtype: E
        """
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key.

        :param entity_id: Primary-key value.
        :returns: Entity or ``None``.
        :raises RuntimeError: If no PK attribute can be detected.
        """
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get requires a detectable PK attribute.")
        result = self.session.execute(select(self.model).where(pk_attr == entity_id))
        return cast(E | None, result.scalars().first())

    def find_one(self, **filters: Any) -> E | None:
        """Find a single entity by whitelisted equality filters."""
        stmt: Select[Any] = self._apply_equality_filters(select(self.model), filters)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def exists(self, **filters: Any) -> bool:
        """Return ``True`` when at least one row matches the equality filters."""
        stmt: Select[Any] = select(func.count()).select_from(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        return bool(self.session.execute(stmt).scalar_one())

    def flush(self) -> None:
        """Flush pending changes to the database without committing."""
        self.session.flush()
