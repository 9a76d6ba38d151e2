# clicker_server/services/auth/refresh_tokens.py
from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import datetime
from uuid import UUID

from clicker_server.services._shared.errors import (
    TokenExpiredError,
    TokenNotFoundError,
    TokenRevokedError,
)
from clicker_server.services._shared.ports import RefreshTokenRecords, utc_now

# 256 bits of entropy, hex-encoded (64 URL-safe characters)
TOKEN_BYTES = 32


class RefreshTokenStore:
    """
    Lifecycle of opaque refresh tokens: generate, persist, resolve, revoke.

    Persistence is delegated to a :class:`RefreshTokenRecords` backend; this
    class owns the usability rules. A token is usable iff it exists, has no
    ``revoked_at`` and ``now < expires_at``.
    """

    def __init__(
        self,
        records: RefreshTokenRecords,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.records = records
        self._clock = clock

    @staticmethod
    def generate() -> str:
        """Return a fresh token from the OS CSPRNG (collisions are negligible, not checked)."""
        return secrets.token_hex(TOKEN_BYTES)

    def persist(self, token: str, user_id: UUID, expires_at: datetime) -> None:
        """:raises StoreFailureError: When the backend cannot store the token."""
        self.records.store_refresh_token(token=token, user_id=user_id, expires_at=expires_at)

    def resolve(self, token: str) -> UUID:
        """
        Return the owning user id of a usable token.

        :raises TokenNotFoundError: Unknown token.
        :raises TokenRevokedError: ``revoked_at`` is set (checked before expiry).
        :raises TokenExpiredError: ``now >= expires_at``.
        :raises StoreFailureError: Backend failure.
        """
        record = self.records.get_refresh_token(token)
        if record is None:
            raise TokenNotFoundError()
        if record.revoked:
            raise TokenRevokedError()
        if self._clock() >= record.expires_at:
            raise TokenExpiredError()
        return record.user_id

    def revoke(self, token: str) -> None:
        """
        Revoke ``token``. Revoking twice succeeds and keeps the first ``revoked_at``.

        :raises TokenNotFoundError: Unknown token.
        :raises StoreFailureError: Backend failure.
        """
        if self.records.revoke_token(token, revoked_at=self._clock()) is None:
            raise TokenNotFoundError()
