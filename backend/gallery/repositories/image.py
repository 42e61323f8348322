"""Image repository plus the query builder used by the listing workflow."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import ColumnElement, Select, and_, select

from gallery.models.image import Image
from gallery.repositories.base import BaseRepository, paginate_select

if TYPE_CHECKING:
    from gallery.services.images.dto import ImageFilterIn


def _as_utc(moment: datetime) -> datetime:
    """Naive values are taken as UTC; aware ones are converted to UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class ImageQuery:
    """
    Immutable builder for per-user image selects.

    Each method returns a new query with one more predicate; :meth:`compile`
    turns the accumulated predicates into a single ``Select`` ordered by
    ``uploaded_at`` ascending with the primary key as tiebreaker.

    Examples
    --------
    >>> stmt = ImageQuery.for_user("u-1").min_size(10).max_size(100).compile()
    """

    user_id: str
    predicates: tuple[ColumnElement[bool], ...] = field(default=())

    @classmethod
    def for_user(cls, user_id: str) -> ImageQuery:
        return cls(user_id=user_id)

    @classmethod
    def from_filters(cls, user_id: str, filters: ImageFilterIn | None) -> ImageQuery:
        """Build a query from optional filters; ``None`` fields are skipped."""
        query = cls.for_user(user_id)
        if filters is None:
            return query
        if filters.created_after is not None:
            query = query.uploaded_after(filters.created_after)
        if filters.created_before is not None:
            query = query.uploaded_before(filters.created_before)
        if filters.min_size is not None:
            query = query.min_size(filters.min_size)
        if filters.max_size is not None:
            query = query.max_size(filters.max_size)
        return query

    def _with(self, clause: ColumnElement[bool]) -> ImageQuery:
        return replace(self, predicates=(*self.predicates, clause))

    def uploaded_after(self, moment: datetime) -> ImageQuery:
        return self._with(Image.uploaded_at >= _as_utc(moment))

    def uploaded_before(self, moment: datetime) -> ImageQuery:
        return self._with(Image.uploaded_at <= _as_utc(moment))

    def min_size(self, size: int) -> ImageQuery:
        return self._with(Image.size >= int(size))

    def max_size(self, size: int) -> ImageQuery:
        return self._with(Image.size <= int(size))

    def compile(self) -> Select[Any]:
        """Return the tenant-scoped, filtered and ordered select."""
        return (
            select(Image)
            .where(and_(Image.user_id == self.user_id, *self.predicates))
            .order_by(Image.uploaded_at.asc(), Image.id.asc())
        )


class ImageRepository(BaseRepository[Image]):
    """Persistence-only repository for :class:`Image`.

    Every read is scoped to one owner; there is no cross-tenant listing.
    """

    model = Image

    def find_by_filter(
        self,
        user_id: str,
        filters: ImageFilterIn | None,
        *,
        skip: int,
        take: int,
    ) -> tuple[list[Image], int]:
        """Return one page of the owner's images plus the filtered total.

        :param user_id: Owner id; always applied.
        :type user_id: str
        :param filters: Optional upload-date and size bounds (inclusive).
        :type filters: ImageFilterIn | None
        :param skip: Rows to skip.
        :type skip: int
        :param take: Page size.
        :type take: int
        :returns: ``(items, total)``.
        :rtype: tuple[list[Image], int]
        """
        stmt = ImageQuery.from_filters(user_id, filters).compile()
        items, total = paginate_select(self.session, stmt, skip=skip, take=take)
        return cast(list[Image], items), total

    def get_for_user(self, image_id: str, user_id: str) -> Image | None:
        """Fetch an image by id only if it belongs to ``user_id``."""
        stmt = select(Image).where(Image.id == image_id, Image.user_id == user_id)
        return cast(Image | None, self.session.execute(stmt).scalars().first())

    def add_many(self, images: list[Image]) -> list[Image]:
        """Stage several images and flush once."""
        self.session.add_all(images)
        self.flush()
        return images
