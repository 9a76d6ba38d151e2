"""Refresh token repository."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete

from clicker_server.models.refresh_token import RefreshToken
from clicker_server.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken` rows."""

    model = RefreshToken

    def create(self, *, token: str, user_id: UUID, expires_at: datetime) -> RefreshToken:
        """Insert a new, unrevoked token row."""
        return self.add(RefreshToken(token=token, user_id=user_id, expires_at=expires_at))

    def mark_revoked(self, token: str, *, revoked_at: datetime) -> RefreshToken | None:
        """
        Set ``revoked_at`` unless it is already set.

        :returns: The row after the update, or ``None`` when it does not exist.
        """
        row = self.get(token)
        if row is None:
            return None
        if row.revoked_at is None:
            row.revoked_at = revoked_at
            self.flush()
        return row

    def delete_expired(self, *, before: datetime) -> int:
        """Bulk-delete rows whose ``expires_at`` is earlier than ``before``.

        :returns: Number of deleted rows.
        """
        stmt = (
            delete(RefreshToken)
            .where(RefreshToken.expires_at < before)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return int(result.rowcount or 0)
