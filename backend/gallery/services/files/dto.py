# gallery/services/files/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class FileIn:
    """
    One uploaded file, already read from the transport.

    :param filename: Original client-side name.
    :type filename: str
    :param content_type: MIME type reported by the client.
    :type content_type: str
    :param data: File contents.
    :type data: bytes
    """

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True, slots=True)
class StoredObjectOut:
    """
    Descriptor of an object written to storage.

    :param file_name: Original name of the file.
    :param content_type: MIME type sent to storage.
    :param size: Size in bytes.
    :param public_url: Public URL of the object.
    :param created_at: When the object was stored (UTC).
    """

    file_name: str
    content_type: str
    size: int
    public_url: str
    created_at: datetime
