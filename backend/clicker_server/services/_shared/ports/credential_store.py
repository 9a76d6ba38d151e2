from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from clicker_server.services._shared.errors import UsernameTakenError


def utc_now() -> datetime:
    """Default clock: timezone-aware UTC now."""
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class UserRecord:
    """
    Read-model for a user identity.

    ``hashed_password`` is only ever consumed by the password hasher; it is
    never serialized outward.
    """

    id: UUID
    username: str
    hashed_password: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Read-model for a stored refresh token.

    :ivar token: Opaque token string (primary key).
    :ivar user_id: Owner user id.
    :ivar expires_at: Absolute expiration (UTC).
    :ivar revoked_at: Revocation instant (UTC) or ``None``.
    """

    token: str
    user_id: UUID
    expires_at: datetime
    revoked_at: datetime | None = None

    @property
    def revoked(self) -> bool:
        return self.revoked_at is not None


class RefreshTokenRecords(Protocol):
    """
    Persistence for refresh-token records.

    ``None`` means "not found"; every other failure MUST surface as
    :class:`~clicker_server.services._shared.errors.StoreFailureError`.
    """

    def store_refresh_token(
        self, *, token: str, user_id: UUID, expires_at: datetime
    ) -> RefreshTokenRecord: ...

    def get_refresh_token(self, token: str) -> RefreshTokenRecord | None: ...

    def revoke_token(self, token: str, *, revoked_at: datetime) -> RefreshTokenRecord | None:
        """
        Set ``revoked_at`` unless already set.

        :returns: The record after the call, or ``None`` if it does not exist.
        """
        ...


class UserStore(Protocol):
    """Persistence for user identities (and the save lookup used at login)."""

    def create_user(self, *, username: str, hashed_password: str) -> UserRecord:
        """:raises UsernameTakenError: If the username already exists."""
        ...

    def get_user_by_username(self, username: str) -> UserRecord | None: ...

    def get_user_by_id(self, user_id: UUID) -> UserRecord | None: ...

    def get_save_id_for_user(self, user_id: UUID) -> UUID | None: ...


class CredentialStore(UserStore, RefreshTokenRecords, Protocol):
    """Full store collaborator consumed by the authentication core."""


class InMemoryCredentialStore(CredentialStore):
    """
    In-memory store implementing the full collaborator contract.

    .. note::
       Uses a threading lock so each call is atomic, mirroring the
       per-statement atomicity of a real database.
    """

    def __init__(self, *, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock
        self._users: dict[UUID, UserRecord] = {}
        self._by_username: dict[str, UUID] = {}
        self._tokens: dict[str, RefreshTokenRecord] = {}
        self._saves: dict[UUID, UUID] = {}
        self._lock = threading.Lock()

    # -------------------------- users ----------------------------

    def create_user(self, *, username: str, hashed_password: str) -> UserRecord:
        with self._lock:
            if username in self._by_username:
                raise UsernameTakenError()
            now = self._clock()
            user = UserRecord(
                id=uuid4(),
                username=username,
                hashed_password=hashed_password,
                created_at=now,
                updated_at=now,
            )
            self._users[user.id] = user
            self._by_username[username] = user.id
            return user

    def get_user_by_username(self, username: str) -> UserRecord | None:
        user_id = self._by_username.get(username)
        return self._users.get(user_id) if user_id else None

    def get_user_by_id(self, user_id: UUID) -> UserRecord | None:
        return self._users.get(user_id)

    def get_save_id_for_user(self, user_id: UUID) -> UUID | None:
        return self._saves.get(user_id)

    def link_save(self, user_id: UUID, save_id: UUID | None = None) -> UUID:
        """Attach a save to ``user_id`` (test helper)."""
        with self._lock:
            self._saves[user_id] = save_id or uuid4()
            return self._saves[user_id]

    # ---------------------- refresh tokens -----------------------

    def store_refresh_token(
        self, *, token: str, user_id: UUID, expires_at: datetime
    ) -> RefreshTokenRecord:
        with self._lock:
            record = RefreshTokenRecord(token=token, user_id=user_id, expires_at=expires_at)
            self._tokens[token] = record
            return record

    def get_refresh_token(self, token: str) -> RefreshTokenRecord | None:
        return self._tokens.get(token)

    def revoke_token(self, token: str, *, revoked_at: datetime) -> RefreshTokenRecord | None:
        with self._lock:
            record = self._tokens.get(token)
            if record is None:
                return None
            if record.revoked_at is None:
                record = replace(record, revoked_at=revoked_at)
                self._tokens[token] = record
            return record
