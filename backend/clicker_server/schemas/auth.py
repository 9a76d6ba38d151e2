"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, validate, validates


class CredentialsSchema(Schema):
    """Input payload for registration and login."""

    username = fields.String(required=True, validate=validate.Length(min=1, max=50))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))

    @validates("username")
    def validate_username(self, value: str, **_: Any) -> None:
        if not value.strip():
            raise ValidationError("Username must not be blank.")


class UserSchema(Schema):
    """Public user representation (never includes the password hash)."""

    id = fields.UUID(required=True)
    username = fields.String(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)


class LoginResponseSchema(UserSchema):
    """Login payload: the user plus the session tokens and save id."""

    token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    save_id = fields.UUID(allow_none=True)


class TokenResponseSchema(Schema):
    """Response payload containing a fresh access token."""

    token = fields.String(required=True)
