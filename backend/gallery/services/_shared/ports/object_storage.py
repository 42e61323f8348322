from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

PUBLIC_URL_BASE = "https://storage.googleapis.com"


def public_url_for(bucket_name: str, key: str) -> str:
    """Return the public HTTPS URL of ``key`` inside ``bucket_name``."""
    return f"{PUBLIC_URL_BASE}/{bucket_name}/{key}"


class ObjectStorage(Protocol):
    """
    Save-by-key object storage.

    Implementations must be safe to call from several threads at once.
    """

    bucket_name: str

    def save(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str | None,
        cache_control: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> str:
        """Store ``data`` under ``key`` and return its public URL."""
        ...


@dataclass(frozen=True, slots=True)
class StoredObject:
    """Snapshot of an object held by :class:`InMemoryObjectStorage`."""

    key: str
    data: bytes
    content_type: str | None
    cache_control: str | None
    metadata: dict[str, str] = field(default_factory=dict)


class InMemoryObjectStorage(ObjectStorage):
    """Process-local storage for development and tests."""

    def __init__(self, bucket_name: str = "local") -> None:
        self.bucket_name = bucket_name
        self._objects: dict[str, StoredObject] = {}
        self._lock = threading.Lock()

    def save(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str | None,
        cache_control: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> str:
        obj = StoredObject(
            key=key,
            data=bytes(data),
            content_type=content_type,
            cache_control=cache_control,
            metadata=dict(metadata or {}),
        )
        with self._lock:
            self._objects[key] = obj
        return public_url_for(self.bucket_name, key)

    def get(self, key: str) -> StoredObject | None:
        with self._lock:
            return self._objects.get(key)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._objects)

    def __len__(self) -> int:
        with self._lock:
            return len(self._objects)

    def clear(self) -> None:
        with self._lock:
            self._objects.clear()
