"""User endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from clicker_server.api.deps import json_response, timing
from clicker_server.core.container import get_auth_gateway
from clicker_server.schemas import CredentialsSchema, UserSchema
from clicker_server.services.auth.dto import CredentialsIn

bp = Blueprint("users", __name__)

credentials_schema = CredentialsSchema()
user_schema = UserSchema()


@bp.post("")
@timing
def create_user():
    """Register a new user and return its public representation."""

    data = credentials_schema.load(request.get_json(silent=True) or {})
    user = get_auth_gateway().register(CredentialsIn(**data))
    return json_response(user_schema.dump(user), status=201)
