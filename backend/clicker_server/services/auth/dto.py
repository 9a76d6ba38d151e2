# clicker_server/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Final
from uuid import UUID

# Fixed lifetimes (not runtime-configurable)
ACCESS_TOKEN_TTL: Final[timedelta] = timedelta(hours=1)
REFRESH_TOKEN_TTL: Final[timedelta] = timedelta(days=60)

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class CredentialsIn:
    """
    Input DTO for registration and login.

    :param username: Login handle.
    :type username: str
    :param password: Raw password (hashed or verified, never stored as-is).
    :type password: str
    """

    username: str
    password: str

    def __repr__(self) -> str:
        return f"CredentialsIn(username={self.username!r}, password='***')"


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public-safe user payload (no password hash).

    :param id: User id.
    :param username: Login handle.
    :param created_at: Creation timestamp.
    :param updated_at: Last update timestamp.
    """

    id: UUID
    username: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Session bundle returned by a successful login.

    :param user: Authenticated user.
    :type user: UserPublicOut
    :param access_token: Signed access token (1 hour).
    :type access_token: str
    :param refresh_token: Opaque refresh token (60 days), already persisted.
    :type refresh_token: str
    :param save_id: The user's save id, ``None`` for a new player.
    :type save_id: UUID | None
    """

    user: UserPublicOut
    access_token: str
    refresh_token: str
    save_id: UUID | None

    @property
    def user_id(self) -> UUID:
        return self.user.id


@dataclass(frozen=True, slots=True)
class RefreshOut:
    """
    Output DTO for a refresh.

    :param access_token: Newly minted access token.
    :type access_token: str
    """

    access_token: str


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Immutable signing configuration, built once at startup.

    :param signing_secret: HMAC key for access tokens.
    :type signing_secret: str
    :param issuer: Expected/emitted ``iss`` claim.
    :type issuer: str
    """

    signing_secret: str
    issuer: str

    def __repr__(self) -> str:
        return f"AuthTokenConfig(signing_secret='***', issuer={self.issuer!r})"
