"""
DTOs for SaveService.

Framework-agnostic contracts between the API layer and the service managing
the opaque ``Save`` blob of a player.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class SaveCreateIn:
    """
    Input DTO for creating the first save of a user.

    :param user_id: Authenticated owner.
    :type user_id: UUID
    :param savedata: Opaque client payload (never interpreted server-side).
    :type savedata: str
    """

    user_id: UUID
    savedata: str


@dataclass(frozen=True, slots=True)
class SaveUpdateIn:
    """
    Input DTO for overwriting an existing save.

    :param save_id: Save identifier.
    :type save_id: UUID
    :param user_id: Authenticated actor (must own the save).
    :type user_id: UUID
    :param savedata: New opaque payload.
    :type savedata: str
    """

    save_id: UUID
    user_id: UUID
    savedata: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class SaveOut:
    id: UUID
    user_id: UUID
    savedata: str
    created_at: datetime
    updated_at: datetime
