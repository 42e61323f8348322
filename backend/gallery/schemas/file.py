"""Schemas for stored-object descriptors."""

from __future__ import annotations

from marshmallow import Schema, fields


class StoredObjectSchema(Schema):
    """Response payload of a single-file upload."""

    file_name = fields.String(data_key="fileName")
    content_type = fields.String(data_key="contentType")
    size = fields.Integer()
    public_url = fields.String(data_key="publicURL")
    created_at = fields.DateTime(data_key="createdAt")
