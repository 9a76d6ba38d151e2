"""
Unit tests for the SQLAlchemy Units of Work (writer and read-only).
"""

from __future__ import annotations

import pytest
from clicker_server.models import User
from clicker_server.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

from tests.factories.user import UserFactory


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, app, db, session):
        """
        GIVEN a writer UoW
        WHEN we create a user via repo inside the context and leave without exception
        THEN the transaction is committed and the row is visible afterwards.
        """
        initial = db.session.query(User).count()

        with SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())

        assert db.session.query(User).count() == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, app, db, session):
        initial = db.session.query(User).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())
            raise RuntimeError("boom")

        assert db.session.query(User).count() == initial


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_reads_are_allowed(self, session):
        user = UserFactory(username="reader")
        session.commit()
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            assert uow.users.get_by_username("reader").id == user.id

    def test_flush_of_pending_objects_is_blocked(self, session):
        with pytest.raises(RuntimeError), SQLAlchemyReadOnlyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())

    def test_commit_is_refused(self, session):
        with pytest.raises(RuntimeError), SQLAlchemyReadOnlyUnitOfWork() as uow:
            uow.commit()

    def test_guard_is_removed_on_exit(self, session):
        with SQLAlchemyReadOnlyUnitOfWork():
            pass
        with SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())
