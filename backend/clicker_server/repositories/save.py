"""Save repository."""

from __future__ import annotations

from typing import cast
from uuid import UUID

from sqlalchemy import select

from clicker_server.models.save import Save
from clicker_server.repositories.base import BaseRepository


class SaveRepository(BaseRepository[Save]):
    """Persistence-only repository for :class:`Save`."""

    model = Save

    def get_by_user_id(self, user_id: UUID) -> Save | None:
        """Return the save owned by ``user_id`` (at most one exists)."""
        stmt = select(Save).where(Save.user_id == user_id)
        return cast(Save | None, self.session.execute(stmt).scalars().first())

    def get_id_by_user_id(self, user_id: UUID) -> UUID | None:
        """Return only the save id owned by ``user_id``."""
        stmt = select(Save.id).where(Save.user_id == user_id)
        return cast(UUID | None, self.session.execute(stmt).scalar_one_or_none())
