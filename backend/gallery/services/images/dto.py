# gallery/services/images/dto.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from gallery.models.image import Image


@dataclass(frozen=True, slots=True)
class ImageFilterIn:
    """
    Optional listing filters; ``None`` means "no bound". Bounds are inclusive.

    :param created_after: Lower bound on ``uploaded_at``.
    :type created_after: datetime | None
    :param created_before: Upper bound on ``uploaded_at``.
    :type created_before: datetime | None
    :param min_size: Lower bound on ``size`` (bytes).
    :type min_size: int | None
    :param max_size: Upper bound on ``size`` (bytes).
    :type max_size: int | None
    """

    created_after: datetime | None = None
    created_before: datetime | None = None
    min_size: int | None = None
    max_size: int | None = None


@dataclass(frozen=True, slots=True)
class ImageOut:
    """Public projection of :class:`~gallery.models.image.Image`."""

    id: str
    file_name: str
    content_type: str
    size: int
    public_url: str
    uploaded_at: datetime
    user_id: str

    @classmethod
    def from_model(cls, image: Image) -> ImageOut:
        return cls(
            id=image.id,
            file_name=image.file_name,
            content_type=image.content_type,
            size=image.size,
            public_url=image.public_url,
            uploaded_at=image.uploaded_at,
            user_id=image.user_id,
        )


@dataclass(frozen=True, slots=True)
class ImagesUploadedOut:
    """
    Result of a successful multi-image upload.

    :param success: Always ``True``; failures raise instead.
    :param message: ``"Successfully uploaded N images"``.
    :param data: Stored images, in request order.
    :param count: ``len(data)``.
    """

    success: bool
    message: str
    data: Sequence[ImageOut]
    count: int
