"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import AuthedUserSchema, LoginSchema, SignupSchema, UserPublicSchema
from .common import page_schema
from .file import StoredObjectSchema
from .image import GetImagesQuerySchema, ImageSchema, ImagesUploadedSchema

__all__ = [
    "AuthedUserSchema",
    "GetImagesQuerySchema",
    "ImageSchema",
    "ImagesUploadedSchema",
    "LoginSchema",
    "SignupSchema",
    "StoredObjectSchema",
    "UserPublicSchema",
    "page_schema",
]
