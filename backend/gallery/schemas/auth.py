"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

_not_blank = validate.Regexp(r"\S", error="Must not be blank.")


class SignupSchema(Schema):
    """Input payload for account creation."""

    username = fields.String(required=True, validate=[validate.Length(min=1, max=50), _not_blank])
    name = fields.String(required=True, validate=[validate.Length(min=1, max=100), _not_blank])
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    username = fields.String(required=True, validate=[validate.Length(min=1, max=50), _not_blank])
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class UserPublicSchema(Schema):
    """Public user representation (no hashes)."""

    id = fields.String(required=True)
    name = fields.String(required=True)
    username = fields.String(required=True)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")


class AuthedUserSchema(Schema):
    """Response payload of signup, login and refresh."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")
    user = fields.Nested(UserPublicSchema, required=True)
