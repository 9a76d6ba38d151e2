"""Session endpoints: login, refresh, revoke and whoami."""

from __future__ import annotations

from flask import Blueprint, request

from clicker_server.api.deps import (
    bearer_token,
    current_user_id,
    json_response,
    require_access_token,
    timing,
)
from clicker_server.core.container import get_auth_gateway
from clicker_server.schemas import (
    CredentialsSchema,
    LoginResponseSchema,
    TokenResponseSchema,
    UserSchema,
)
from clicker_server.services.auth.dto import CredentialsIn

bp = Blueprint("auth", __name__)

credentials_schema = CredentialsSchema()
login_schema = LoginResponseSchema()
token_schema = TokenResponseSchema()
user_schema = UserSchema()


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and open a session."""

    data = credentials_schema.load(request.get_json(silent=True) or {})
    out = get_auth_gateway().login(CredentialsIn(**data))
    body = login_schema.dump(
        {
            "id": out.user.id,
            "username": out.user.username,
            "created_at": out.user.created_at,
            "updated_at": out.user.updated_at,
            "token": out.access_token,
            "refresh_token": out.refresh_token,
            "save_id": out.save_id,
        }
    )
    return json_response(body)


@bp.post("/refresh")
@timing
def refresh():
    """Exchange the bearer refresh token for a new access token."""

    out = get_auth_gateway().refresh(bearer_token())
    return json_response(token_schema.dump({"token": out.access_token}))


@bp.post("/revoke")
@timing
def revoke():
    """Revoke the bearer refresh token."""

    get_auth_gateway().revoke(bearer_token())
    return "", 204


@bp.get("/whoami")
@require_access_token
@timing
def whoami():
    """Return the authenticated user profile."""

    user = get_auth_gateway().whoami(current_user_id())
    return json_response(user_schema.dump(user))
