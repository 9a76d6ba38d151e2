"""SQLAlchemy-backed store collaborator for the authentication core."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from clicker_server.models.refresh_token import RefreshToken, as_utc
from clicker_server.models.user import User
from clicker_server.services._shared.errors import StoreFailureError, UsernameTakenError
from clicker_server.services._shared.ports import (
    CredentialStore,
    RefreshTokenRecord,
    UserRecord,
    utc_now,
)
from clicker_server.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


@contextmanager
def _store_call(operation: str) -> Iterator[None]:
    """Translate driver errors into :class:`StoreFailureError`, logging the cause."""
    try:
        yield
    except SQLAlchemyError as exc:
        log.error(
            "store.failure operation=%s",
            operation,
            exc_info=True,
            extra={"error_kind": StoreFailureError.kind},
        )
        raise StoreFailureError() from exc


def _user_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        username=user.username,
        hashed_password=user.hashed_password,
        created_at=as_utc(user.created_at),
        updated_at=as_utc(user.updated_at),
    )


def _token_record(row: RefreshToken) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        token=row.token,
        user_id=row.user_id,
        expires_at=as_utc(row.expires_at),
        revoked_at=as_utc(row.revoked_at) if row.revoked_at is not None else None,
    )


class SQLAlchemyCredentialStore(CredentialStore):
    """
    Relational implementation of :class:`CredentialStore`.

    Every method runs in its own Unit of Work: a single atomic statement
    group, committed on success. Nothing is cached between calls.

    :param clock: Source of "now" for maintenance operations.
    """

    def __init__(self, *, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock

    # -------------------------- users ----------------------------

    def create_user(self, *, username: str, hashed_password: str) -> UserRecord:
        with _store_call("create_user"):
            try:
                with SQLAlchemyUnitOfWork() as uow:
                    if uow.users.exists_by_username(username):
                        raise UsernameTakenError()
                    user = uow.users.add(User(username=username, hashed_password=hashed_password))
                    user_id = user.id
            except IntegrityError as exc:
                # Lost a race against a concurrent registration of the same name
                raise UsernameTakenError() from exc

        # Re-read after commit so server-side timestamps are populated
        created = self.get_user_by_id(user_id)
        if created is None:  # pragma: no cover - committed row vanished
            raise StoreFailureError()
        return created

    def get_user_by_username(self, username: str) -> UserRecord | None:
        with _store_call("get_user_by_username"), SQLAlchemyReadOnlyUnitOfWork() as uow:
            user = uow.users.get_by_username(username)
            return _user_record(user) if user is not None else None

    def get_user_by_id(self, user_id: UUID) -> UserRecord | None:
        with _store_call("get_user_by_id"), SQLAlchemyReadOnlyUnitOfWork() as uow:
            user = uow.users.get(user_id)
            return _user_record(user) if user is not None else None

    def get_save_id_for_user(self, user_id: UUID) -> UUID | None:
        with _store_call("get_save_id_for_user"), SQLAlchemyReadOnlyUnitOfWork() as uow:
            return uow.saves.get_id_by_user_id(user_id)

    # ---------------------- refresh tokens -----------------------

    def store_refresh_token(
        self, *, token: str, user_id: UUID, expires_at: datetime
    ) -> RefreshTokenRecord:
        with _store_call("store_refresh_token"), SQLAlchemyUnitOfWork() as uow:
            row = uow.refresh_tokens.create(token=token, user_id=user_id, expires_at=expires_at)
            record = _token_record(row)
        return record

    def get_refresh_token(self, token: str) -> RefreshTokenRecord | None:
        with _store_call("get_refresh_token"), SQLAlchemyReadOnlyUnitOfWork() as uow:
            row = uow.refresh_tokens.get(token)
            return _token_record(row) if row is not None else None

    def revoke_token(self, token: str, *, revoked_at: datetime) -> RefreshTokenRecord | None:
        with _store_call("revoke_token"), SQLAlchemyUnitOfWork() as uow:
            row = uow.refresh_tokens.mark_revoked(token, revoked_at=revoked_at)
            record = _token_record(row) if row is not None else None
        return record

    # ------------------------ maintenance ------------------------

    def prune_expired(self, *, before: datetime | None = None) -> int:
        """Delete refresh tokens that expired before ``before`` (default: now)."""
        cutoff = before or self._clock()
        with _store_call("prune_expired"), SQLAlchemyUnitOfWork() as uow:
            return uow.refresh_tokens.delete_expired(before=cutoff)
