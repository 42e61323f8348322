"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from marshmallow import Schema, fields


def page_schema(item_schema: type[Schema]) -> Schema:
    """Return a schema dumping :class:`~gallery.services.PageOut` of ``item_schema``."""

    class PageSchema(Schema):
        page_number = fields.Integer(data_key="pageNumber")
        page_size = fields.Integer(data_key="pageSize")
        total_items = fields.Integer(data_key="totalItems")
        data = fields.List(fields.Nested(item_schema))

    return PageSchema()
