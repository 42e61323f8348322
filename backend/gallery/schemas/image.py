"""Image listing and upload schemas."""

from __future__ import annotations

from datetime import UTC
from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates_schema


class ImageSchema(Schema):
    """Image metadata as returned to clients."""

    id = fields.String()
    file_name = fields.String(data_key="fileName")
    content_type = fields.String(data_key="contentType")
    size = fields.Integer()
    public_url = fields.String(data_key="publicURL")
    uploaded_at = fields.DateTime(data_key="uploadedAt")
    user_id = fields.String(data_key="userId")


class ImagesUploadedSchema(Schema):
    """Response payload of a multi-image upload."""

    success = fields.Boolean()
    message = fields.String()
    data = fields.List(fields.Nested(ImageSchema))
    count = fields.Integer()


class GetImagesQuerySchema(Schema):
    """
    Query string of ``GET /images``.

    Page number and size stay raw strings: the service sanitizes them
    (garbage falls back to defaults instead of failing the request).
    """

    class Meta:
        unknown = EXCLUDE

    page_number = fields.String(data_key="pageNumber", load_default=None)
    page_size = fields.String(data_key="pageSize", load_default=None)
    created_after = fields.AwareDateTime(
        data_key="createdAfter", load_default=None, default_timezone=UTC
    )
    created_before = fields.AwareDateTime(
        data_key="createdBefore", load_default=None, default_timezone=UTC
    )
    min_size = fields.Integer(
        data_key="minSize", load_default=None, validate=validate.Range(min=0)
    )
    max_size = fields.Integer(
        data_key="maxSize", load_default=None, validate=validate.Range(min=0)
    )

    @validates_schema
    def _check_ranges(self, data: dict[str, Any], **_: Any) -> None:
        low, high = data.get("min_size"), data.get("max_size")
        if low is not None and high is not None and low > high:
            raise ValidationError("minSize must not exceed maxSize.", "minSize")
