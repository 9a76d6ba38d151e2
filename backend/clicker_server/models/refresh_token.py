"""Refresh token model: opaque, revocable session credential."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clicker_server.core.extensions import db

from .base import ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User


def as_utc(value: datetime) -> datetime:
    """Label naive datetimes (SQLite drops tzinfo) as UTC."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class RefreshToken(ReprMixin, TimestampMixin, db.Model):
    """
    Stored refresh token.

    The token string itself is the primary key. A row is only ever mutated
    to set ``revoked_at``.
    """

    __tablename__ = "refresh_tokens"
    __repr_key__ = "user_id"

    token: Mapped[str] = mapped_column(String(128), primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped[User] = relationship(back_populates="refresh_tokens")

    __table_args__ = (
        Index("ix_refresh_tokens_user_id", "user_id"),
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )
