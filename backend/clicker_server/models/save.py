"""Save model: opaque game save blob owned by a single user."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clicker_server.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin

if TYPE_CHECKING:
    from .user import User


class Save(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """Game save. ``savedata`` is stored as sent by the client (base64 text)."""

    __tablename__ = "saves"

    savedata: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    user: Mapped[User] = relationship(back_populates="save")

    __table_args__ = (UniqueConstraint("user_id", name="uq_saves_user_id"),)
