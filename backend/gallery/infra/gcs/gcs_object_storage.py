"""Google Cloud Storage adapter for :class:`ObjectStorage`."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from google.cloud import storage  # type: ignore[attr-defined]

from gallery.services._shared.ports.object_storage import ObjectStorage, public_url_for

log = logging.getLogger(__name__)


class GCSObjectStorage(ObjectStorage):
    """
    Store objects in one GCS bucket and return their public URL.

    The ``storage.Client`` is created on first use, so the application can
    boot without credentials until the first upload. The client is
    thread-safe and shared by the upload pool.

    :param bucket_name: Target bucket.
    :param project_id: GCP project; ``None`` lets the SDK infer it.
    :param client: Pre-built client (tests, custom credentials).
    """

    def __init__(
        self,
        bucket_name: str,
        project_id: str | None = None,
        *,
        client: Any | None = None,
    ) -> None:
        self.bucket_name = bucket_name
        self.project_id = project_id
        self._client = client
        self._bucket: Any | None = None
        self._lock = threading.Lock()

    @property
    def bucket(self) -> Any:
        """Bucket handle, created together with the client on first access."""
        if self._bucket is None:
            with self._lock:
                if self._bucket is None:
                    if self._client is None:
                        self._client = storage.Client(project=self.project_id)
                    self._bucket = self._client.bucket(self.bucket_name)
                    log.info("GCS bucket handle ready: %s", self.bucket_name)
        return self._bucket

    def save(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str | None,
        cache_control: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> str:
        """
        Upload ``data`` to ``key``.

        Errors from the SDK (``GoogleCloudError`` and transport errors)
        propagate to the caller.

        :returns: ``https://storage.googleapis.com/<bucket>/<key>``.
        """
        blob = self.bucket.blob(key)
        if cache_control:
            blob.cache_control = cache_control
        if metadata:
            blob.metadata = dict(metadata)
        blob.upload_from_string(data, content_type=content_type)
        log.debug("Uploaded object", extra={"object_key": key})
        return public_url_for(self.bucket_name, key)
