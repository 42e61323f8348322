"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from gallery.repositories.base import BaseRepository, Pagination, paginate_select
from gallery.repositories.image import ImageQuery, ImageRepository
from gallery.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    "Pagination",
    "paginate_select",
    # Domain
    "ImageQuery",
    "ImageRepository",
    "UserRepository",
]
