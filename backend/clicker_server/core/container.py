"""Composition root: build the authentication components once per app."""

from __future__ import annotations

from typing import cast

from flask import Flask, current_app

from clicker_server.core.config import PLACEHOLDER_JWT_SECRET
from clicker_server.core.extensions import get_redis
from clicker_server.infra.jwt.access_token_codec import JWTAccessTokenCodec
from clicker_server.infra.redis.redis_refresh_token_records import RedisRefreshTokenRecords
from clicker_server.infra.security.password_hasher import DEFAULT_METHOD, WerkzeugPasswordHasher
from clicker_server.infra.sqlalchemy.credential_store import SQLAlchemyCredentialStore
from clicker_server.services._shared.ports import RefreshTokenRecords
from clicker_server.services.auth.dto import AuthTokenConfig
from clicker_server.services.auth.refresh_tokens import RefreshTokenStore
from clicker_server.services.auth.service import AuthenticationGateway

EXTENSION_KEY = "auth_gateway"
REFRESH_BACKENDS = ("sql", "redis")


def token_config_from(app: Flask) -> AuthTokenConfig:
    """Freeze the signing settings of ``app`` into an immutable value.

    :raises RuntimeError: If the secret is empty, or still the placeholder
        outside debug/testing.
    """
    secret = str(app.config.get("JWT_SECRET") or "")
    issuer = str(app.config.get("JWT_ISSUER") or "")
    if not secret or not issuer:
        raise RuntimeError("JWT_SECRET and JWT_ISSUER must be set.")
    if secret == PLACEHOLDER_JWT_SECRET and not (app.debug or app.testing):
        raise RuntimeError("Refusing to start with the placeholder JWT_SECRET.")
    return AuthTokenConfig(signing_secret=secret, issuer=issuer)


def build_auth_gateway(app: Flask) -> AuthenticationGateway:
    """Assemble an :class:`AuthenticationGateway` from ``app.config``.

    Users always live in SQL. Refresh tokens live in SQL or Redis depending on
    ``REFRESH_TOKEN_BACKEND``.
    """
    backend = str(app.config.get("REFRESH_TOKEN_BACKEND", "sql")).lower()
    if backend not in REFRESH_BACKENDS:
        raise RuntimeError(f"Unknown REFRESH_TOKEN_BACKEND {backend!r}.")

    sql_store = SQLAlchemyCredentialStore()
    records: RefreshTokenRecords = sql_store
    if backend == "redis":
        records = RedisRefreshTokenRecords(get_redis())

    method = str(app.config.get("PASSWORD_HASH_METHOD") or DEFAULT_METHOD)
    return AuthenticationGateway(
        users=sql_store,
        hasher=WerkzeugPasswordHasher(method=method),
        tokens=JWTAccessTokenCodec(),
        refresh_tokens=RefreshTokenStore(records),
        token_cfg=token_config_from(app),
    )


def init_app(app: Flask) -> None:
    """Build the gateway and register it under ``app.extensions``."""
    app.extensions[EXTENSION_KEY] = build_auth_gateway(app)


def get_auth_gateway() -> AuthenticationGateway:
    """Return the gateway of the current application."""
    return cast(AuthenticationGateway, current_app.extensions[EXTENSION_KEY])
