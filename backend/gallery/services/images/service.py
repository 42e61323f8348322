# gallery/services/images/service.py
from __future__ import annotations

import contextvars
import logging
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from gallery.models.image import Image
from gallery.repositories.image import ImageRepository
from gallery.services._shared.base import BaseService
from gallery.services._shared.dto import PageOut
from gallery.services._shared.errors import BadRequestError, InternalError, NotFoundError
from gallery.services.files.dto import FileIn, StoredObjectOut
from gallery.services.files.service import FileService
from gallery.services.images.dto import ImageFilterIn, ImageOut, ImagesUploadedOut

log = logging.getLogger(__name__)

IMAGES_PREFIX = "images"
MAX_FILES = 10
MAX_FILE_SIZE = 5 * 1024 * 1024
ALLOWED_MIME_TYPES = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
)
DEFAULT_MAX_WORKERS = 4


def validate_images(files: Sequence[FileIn]) -> list[str]:
    """
    Check every file and collect one message per violation.

    Numbering is 1-based in request order. A file can produce two messages
    (bad type and too large).
    """
    errors: list[str] = []
    for index, file in enumerate(files, start=1):
        if file.content_type not in ALLOWED_MIME_TYPES:
            errors.append(f"File {index} ({file.filename}) is not a valid image type")
        if file.size > MAX_FILE_SIZE:
            errors.append(f"File {index} ({file.filename}) exceeds maximum size of 5MB")
    return errors


class ImageService(BaseService):
    """
    Multi-image upload and per-user listing.

    Uploads fan out to a thread pool; only storage calls run on pool threads.
    Metadata rows are written afterwards on the calling thread in a single
    Unit of Work.
    """

    def __init__(self, *, files: FileService, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        """
        :param files: Single-file upload service used for every image.
        :param max_workers: Upper bound on concurrent storage uploads.
        """
        self.files = files
        self.max_workers = max(1, int(max_workers))

    # ------------------------------------------------------------------ #
    # Upload
    # ------------------------------------------------------------------ #

    def upload_images(self, user_id: str, files: Sequence[FileIn] | None) -> ImagesUploadedOut:
        """
        Validate, store and record a batch of images for ``user_id``.

        :param user_id: Owner of the new images.
        :param files: Files in request order.
        :returns: Stored images and their count.
        :raises BadRequestError: If the batch is empty, too large, or any file
            fails validation (no upload happens in that case).
        :raises InternalError: If any storage upload fails. Images stored before
            the failure keep their metadata rows; nothing is rolled back.
        """
        if not files:
            raise BadRequestError("No files uploaded")
        if len(files) > MAX_FILES:
            raise BadRequestError(f"Too many files: at most {MAX_FILES} per request")

        errors = validate_images(files)
        if errors:
            raise BadRequestError("File validation failed", errors)

        stored, failures = self._store_all(files)

        with self.boundary("images.upload", "Failed to upload images"):
            with self.rw_uow() as uow:
                repo: ImageRepository = uow.images
                rows = repo.add_many([self._to_row(user_id, item) for item in stored])
                data = [ImageOut.from_model(row) for row in rows]

        if failures:
            # No rollback: recorded images stay and the caller only sees one error
            log.error(
                "Image batch partially failed; %d of %d stored",
                len(data),
                len(files),
                extra={"user_id": user_id, "count": failures},
            )
            raise InternalError("Failed to upload images")

        log.info("Images uploaded", extra={"user_id": user_id, "count": len(data)})
        return ImagesUploadedOut(
            success=True,
            message=f"Successfully uploaded {len(data)} images",
            data=data,
            count=len(data),
        )

    def _store_all(self, files: Sequence[FileIn]) -> tuple[list[StoredObjectOut], int]:
        """Upload concurrently; return successes in request order and the failure count."""
        workers = min(self.max_workers, len(files))
        stored: list[StoredObjectOut] = []
        failures = 0
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="image-upload") as pool:
            futures: list[Future[StoredObjectOut]] = [
                # Workers see a copy of the caller's context, so logs keep the request id
                pool.submit(
                    contextvars.copy_context().run, self.files.upload_file, file, IMAGES_PREFIX
                )
                for file in files
            ]
            for file, future in zip(files, futures, strict=True):
                try:
                    stored.append(future.result())
                except Exception:
                    failures += 1
                    log.warning(
                        "Image upload failed",
                        extra={"file_name": file.filename},
                        exc_info=True,
                    )
        return stored, failures

    @staticmethod
    def _to_row(user_id: str, item: StoredObjectOut) -> Image:
        return Image(
            file_name=item.file_name,
            content_type=item.content_type,
            size=item.size,
            public_url=item.public_url,
            uploaded_at=item.created_at,
            user_id=user_id,
        )

    # ------------------------------------------------------------------ #
    # Listing
    # ------------------------------------------------------------------ #

    def list_images(
        self,
        user_id: str,
        filters: ImageFilterIn | None = None,
        *,
        page_number: Any = None,
        page_size: Any = None,
    ) -> PageOut[ImageOut]:
        """
        Return one page of the caller's images, oldest first.

        :param user_id: Caller; only their images are visible.
        :param filters: Optional date/size bounds.
        :param page_number: Raw page number, sanitized to ``>= 1``.
        :param page_size: Raw page size, sanitized into ``[1, 100]``.
        :returns: Page with the sanitized numbers and the filtered total.
        """
        pagination = self.ensure_pagination(page_number=page_number, page_size=page_size)
        with self.boundary("images.list", "Failed to list images"):
            with self.ro_uow() as uow:
                repo: ImageRepository = uow.images
                items, total = repo.find_by_filter(
                    user_id, filters, skip=pagination.skip, take=pagination.take
                )
                data = [ImageOut.from_model(row) for row in items]
        return PageOut(
            page_number=pagination.page,
            page_size=pagination.limit,
            total_items=total,
            data=data,
        )

    def get_image(self, image_id: str, user_id: str) -> ImageOut:
        """
        Fetch one image owned by ``user_id``.

        :raises NotFoundError: If it does not exist or belongs to someone else.
        """
        with self.boundary("images.get", "Failed to fetch image"):
            with self.ro_uow() as uow:
                repo: ImageRepository = uow.images
                image = repo.get_for_user(image_id, user_id)
                if image is None:
                    raise NotFoundError("Image", image_id)
                return ImageOut.from_model(image)
