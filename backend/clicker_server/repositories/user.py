"""User repository for identity lookups."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from clicker_server.models.user import User
from clicker_server.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER hashes or verifies passwords; it stores what it is given.
    """

    model = User

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by exact username.

        :param username: Login handle.
        :type username: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.username == username)
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def exists_by_username(self, username: str) -> bool:
        """Return ``True`` when a user with the provided username exists."""
        stmt = select(User.id).where(User.username == username)
        return bool(self.session.execute(stmt).first())
