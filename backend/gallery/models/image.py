"""Image metadata model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from gallery.core.extensions import db

from .base import PKMixin, ReprMixin, utcnow

if TYPE_CHECKING:
    from .user import User


class Image(PKMixin, ReprMixin, db.Model):
    """
    Metadata of one stored image.

    The bytes live in object storage under ``public_url``; this row is
    immutable once created.

    Fields
    ------
    file_name : str
        Original client-side file name.
    content_type : str
        MIME type reported at upload.
    size : int
        Size in bytes (``>= 0``).
    public_url : str
        Public URL returned by the storage backend.
    uploaded_at : datetime
        Upload timestamp, also the listing order key.
    user_id : str
        Owner (FK ``users.id``).
    """

    __tablename__ = "images"

    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    public_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    user: Mapped[User] = relationship(back_populates="images")

    __table_args__ = (
        CheckConstraint("size >= 0", name="size_non_negative"),
        Index("ix_images_user_id_uploaded_at", "user_id", "uploaded_at"),
    )

    @validates("size")
    def _validate_size(self, key: str, value: int) -> int:
        if value is None or int(value) < 0:
            raise ValueError("Image size must be >= 0.")
        return int(value)
