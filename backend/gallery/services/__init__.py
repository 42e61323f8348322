"""Service layer public API.

Callers can import from :mod:`gallery.services` without knowing the internal
package structure.

Re-exports
----------
- Base primitives: :class:`BaseService`, :class:`PageOut`
- Auth: :class:`AuthService` and its DTOs
- Files: :class:`FileService`, :class:`FileIn`, :class:`StoredObjectOut`
- Images: :class:`ImageService`, :class:`ImageFilterIn`, :class:`ImageOut`,
  :class:`ImagesUploadedOut`
"""

from __future__ import annotations

from ._shared.base import BaseService
from ._shared.dto import PageOut
from .auth import AuthedUserOut, AuthService, LoginIn, SignupIn, TokenPairOut, UserPublicOut
from .files import FileIn, FileService, StoredObjectOut
from .images import ImageFilterIn, ImageOut, ImageService, ImagesUploadedOut

__all__ = [
    # Base
    "BaseService",
    "PageOut",
    # Auth
    "AuthService",
    "AuthedUserOut",
    "LoginIn",
    "SignupIn",
    "TokenPairOut",
    "UserPublicOut",
    # Files
    "FileIn",
    "FileService",
    "StoredObjectOut",
    # Images
    "ImageFilterIn",
    "ImageOut",
    "ImageService",
    "ImagesUploadedOut",
]
