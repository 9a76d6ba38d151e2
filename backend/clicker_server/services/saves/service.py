"""
SaveService
===========

Thin application service over the ``Save`` aggregate:

- Create the (single) save of a user.
- Retrieve a save by id.
- Overwrite a save owned by the caller.

Notes
-----
- The save payload is opaque; only emptiness is rejected (at the schema layer).
- Read operations use ``ro_uow()``; write operations use ``rw_uow()``.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.exc import IntegrityError

from clicker_server.models.save import Save
from clicker_server.repositories.save import SaveRepository
from clicker_server.services._shared.base import BaseService
from clicker_server.services._shared.errors import ConflictError, NotFoundError
from clicker_server.services.saves.dto import SaveCreateIn, SaveOut, SaveUpdateIn


class SaveService(BaseService):
    """Application service for player saves (one per user)."""

    def create(self, dto: SaveCreateIn) -> SaveOut:
        """
        Create the save of ``dto.user_id``.

        :raises ConflictError: If the user already owns a save.
        """
        with self.rw_uow() as uow:
            repo: SaveRepository = uow.saves
            if repo.get_by_user_id(dto.user_id) is not None:
                raise ConflictError("Save", "user already has a save")
            try:
                save = repo.add(Save(user_id=dto.user_id, savedata=dto.savedata))
            except IntegrityError as exc:
                # UNIQUE(saves.user_id) lost a race
                raise ConflictError("Save", "user already has a save") from exc
            out = self._to_out(save)
        return out

    def get(self, save_id: UUID) -> SaveOut:
        """
        Return a save by id.

        :raises NotFoundError: If it does not exist.
        """
        with self.ro_uow() as uow:
            save = uow.saves.get(save_id)
            if save is None:
                raise NotFoundError("Save", str(save_id))
            return self._to_out(save)

    def update(self, dto: SaveUpdateIn) -> SaveOut:
        """
        Overwrite the payload of a save owned by ``dto.user_id``.

        :raises NotFoundError: If the save does not exist.
        :raises AuthorizationError: If the save belongs to another user.
        """
        with self.rw_uow() as uow:
            repo: SaveRepository = uow.saves
            save = repo.get(dto.save_id)
            if save is None:
                raise NotFoundError("Save", str(dto.save_id))
            self.ensure_owner(dto.user_id, save.user_id, msg="You can only update your own save.")
            save.savedata = dto.savedata
            repo.flush()
            out = self._to_out(save)
        return out

    # ------------------------------------------------------------------ #
    # Converters
    # ------------------------------------------------------------------ #

    @staticmethod
    def _to_out(save: Save) -> SaveOut:
        return SaveOut(
            id=save.id,
            user_id=save.user_id,
            savedata=save.savedata,
            created_at=save.created_at,
            updated_at=save.updated_at,
        )
