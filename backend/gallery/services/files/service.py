# gallery/services/files/service.py
from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import UTC, datetime

from gallery.services._shared.base import BaseService
from gallery.services._shared.errors import BadRequestError
from gallery.services._shared.ports.object_storage import ObjectStorage
from gallery.services.files.dto import FileIn, StoredObjectOut

log = logging.getLogger(__name__)

DEFAULT_PREFIX = "default"
CACHE_CONTROL = "no-store, max-age=0"

_WHITESPACE = re.compile(r"\s")


def build_object_key(prefix: str, filename: str, moment: datetime) -> str:
    """
    Return ``"<prefix>/<filename>_<epoch millis>"`` with whitespace as ``_``.

    Two uploads of the same name within one millisecond map to the same key.
    """
    millis = int(moment.timestamp() * 1000)
    return _WHITESPACE.sub("_", f"{prefix}/{filename}_{millis}")


class FileService(BaseService):
    """Store single files in object storage; no database access."""

    def __init__(
        self,
        *,
        storage: ObjectStorage,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        :param storage: Object storage adapter.
        :param clock: Returns "now" (UTC); injectable for tests.
        """
        self.storage = storage
        self.clock = clock or (lambda: datetime.now(UTC))

    def upload_file(self, file: FileIn | None, prefix: str = DEFAULT_PREFIX) -> StoredObjectOut:
        """
        Upload one file under ``prefix``.

        :param file: The file, or ``None`` when the request carried none.
        :param prefix: Key prefix (folder).
        :returns: Descriptor including the public URL.
        :raises BadRequestError: If ``file`` is missing.
        :raises InternalError: If the storage backend fails; no retry.
        """
        if file is None:
            raise BadRequestError("No file provided")

        now = self.clock()
        key = build_object_key(prefix, file.filename, now)
        with self.boundary("files.upload", "Failed to upload file"):
            public_url = self.storage.save(
                key,
                file.data,
                content_type=file.content_type,
                cache_control=CACHE_CONTROL,
                metadata={"prefix": file.filename},
            )
        log.info("File stored", extra={"object_key": key, "file_name": file.filename})
        return StoredObjectOut(
            file_name=file.filename,
            content_type=file.content_type,
            size=file.size,
            public_url=public_url,
            created_at=now,
        )
