"""Generic repository base for SQLAlchemy 2.x.

Persistence-only concerns shared by all repositories:

- Session access (injected Unit of Work session, or the Flask-scoped one).
- Primary-key lookup, add and flush.
- No business logic, no commit/rollback. Services own transactions.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, cast

from sqlalchemy.orm import Session

from clicker_server.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define ``model``: the SQLAlchemy mapped class.

    This class NEVER opens, commits or rolls back transactions.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        :param session: Session shared across the Unit of Work scope.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    def get(self, key: Any) -> E | None:
        """Fetch an entity by primary key.

        :param key: Primary-key value.
        :returns: Entity or ``None`` when missing.
        :rtype: E | None
        """
        return self.session.get(self.model, key)

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so generated values are populated.

        :param instance: New entity.
        :returns: The same instance, flushed.
        """
        self.session.add(instance)
        self.flush()
        return instance

    def flush(self) -> None:
        """Flush pending changes without committing."""
        self.session.flush()
