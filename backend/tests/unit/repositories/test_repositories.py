"""Tests for the repository query helpers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from clicker_server.repositories import RefreshTokenRepository, SaveRepository, UserRepository

from tests.factories.save import SaveFactory
from tests.factories.user import UserFactory


def test_user_lookup_by_username(session):
    user = UserFactory(username="carol")
    repo = UserRepository(session=session)
    assert repo.get_by_username("carol") is user
    assert repo.exists_by_username("carol")
    assert not repo.exists_by_username("dave")


def test_create_and_mark_revoked(session):
    user = UserFactory()
    repo = RefreshTokenRepository(session=session)
    expires = datetime.now(UTC) + timedelta(days=1)

    row = repo.create(token="tok", user_id=user.id, expires_at=expires)
    first = datetime.now(UTC)

    assert repo.mark_revoked("tok", revoked_at=first) is row
    repo.mark_revoked("tok", revoked_at=first + timedelta(hours=1))
    assert row.revoked_at == first
    assert repo.mark_revoked("missing", revoked_at=first) is None


def test_save_lookup_by_user(session):
    save = SaveFactory()
    repo = SaveRepository(session=session)
    assert repo.get_by_user_id(save.user_id) is save
    assert repo.get_id_by_user_id(save.user_id) == save.id
