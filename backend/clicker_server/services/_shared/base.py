# clicker_server/services/_shared/base.py
from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from clicker_server.services._shared.errors import AuthorizationError
from clicker_server.services._shared.ports import utc_now
from clicker_server.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Own the clock so time-dependent rules are testable.
    * Offer shared authorization helpers.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize the base service.

        :param clock: Returns the current timezone-aware UTC instant.
        """
        self._clock = clock

    def now_utc(self) -> datetime:
        return self._clock()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork()

    # --------------------------- AuthZ --------------------------------

    def ensure_owner(self, actor_id: object, owner_id: object, *, msg: str | None = None) -> None:
        """
        Ensure the current actor owns the resource.

        :raises AuthorizationError: If actor is not the owner.
        """
        if str(actor_id) != str(owner_id):
            raise AuthorizationError(msg or "You can only access your own resources.")
