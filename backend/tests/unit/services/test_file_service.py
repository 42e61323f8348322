from __future__ import annotations

from datetime import UTC, datetime

import pytest

from gallery.services._shared.errors import BadRequestError, InternalError
from gallery.services._shared.ports.object_storage import InMemoryObjectStorage
from gallery.services.files.dto import FileIn
from gallery.services.files.service import CACHE_CONTROL, FileService, build_object_key

MOMENT = datetime(2024, 1, 1, tzinfo=UTC)
MILLIS = 1704067200000


class _FailingStorage:
    bucket_name = "broken"

    def save(self, key, data, **kwargs):
        raise ConnectionError("network unreachable")


def test_object_key_format():
    assert build_object_key("default", "cat.png", MOMENT) == f"default/cat.png_{MILLIS}"


def test_object_key_replaces_whitespace():
    key = build_object_key("images", "my summer\tphoto.png", MOMENT)
    assert key == f"images/my_summer_photo.png_{MILLIS}"


def test_upload_stores_object_with_headers():
    storage = InMemoryObjectStorage("test-bucket")
    service = FileService(storage=storage, clock=lambda: MOMENT)

    out = service.upload_file(FileIn("a b.png", "image/png", b"12345"))

    key = f"default/a_b.png_{MILLIS}"
    stored = storage.get(key)
    assert out.public_url == f"https://storage.googleapis.com/test-bucket/{key}"
    assert out.size == 5
    assert out.created_at == MOMENT
    assert stored.data == b"12345"
    assert stored.content_type == "image/png"
    assert stored.cache_control == CACHE_CONTROL
    assert stored.metadata == {"prefix": "a b.png"}


def test_upload_uses_given_prefix():
    storage = InMemoryObjectStorage()
    service = FileService(storage=storage, clock=lambda: MOMENT)

    service.upload_file(FileIn("x.gif", "image/gif", b"g"), "avatars")

    assert storage.keys() == [f"avatars/x.gif_{MILLIS}"]


def test_missing_file_is_bad_request():
    service = FileService(storage=InMemoryObjectStorage())
    with pytest.raises(BadRequestError, match="No file provided"):
        service.upload_file(None)


def test_storage_failure_is_internal_error():
    service = FileService(storage=_FailingStorage())

    with pytest.raises(InternalError, match="Failed to upload file") as exc_info:
        service.upload_file(FileIn("a.png", "image/png", b"1"))

    assert isinstance(exc_info.value.__cause__, ConnectionError)
