"""Save data Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class SaveInSchema(Schema):
    """Input payload for creating or overwriting a save."""

    savedata = fields.String(required=True, validate=validate.Length(min=1))


class SaveSchema(Schema):
    """Save representation."""

    id = fields.UUID(required=True)
    user_id = fields.UUID(required=True)
    savedata = fields.String(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)
