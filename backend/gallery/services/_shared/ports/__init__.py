"""
gallery.services._shared.ports
==============================

Collection of *ports* (hexagonal interfaces) the service layer depends on.

Modules
-------
- :mod:`token_provider`:
    Defines :class:`~.TokenProvider` and the verified :class:`~.JwtPayload`.

- :mod:`object_storage`:
    Defines :class:`~.ObjectStorage` plus :class:`~.InMemoryObjectStorage`
    used in development and tests.

Concrete adapters (PyJWT, Google Cloud Storage) live under ``gallery.infra``.
"""

from __future__ import annotations

from .object_storage import InMemoryObjectStorage, ObjectStorage, StoredObject, public_url_for
from .token_provider import ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE, JwtPayload, TokenProvider

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "REFRESH_TOKEN_TYPE",
    "InMemoryObjectStorage",
    "JwtPayload",
    "ObjectStorage",
    "StoredObject",
    "TokenProvider",
    "public_url_for",
]
