# tests/unit/services/test_save_service.py
from __future__ import annotations

from uuid import uuid4

import pytest
from clicker_server.services._shared.errors import AuthorizationError, ConflictError, NotFoundError
from clicker_server.services.saves.dto import SaveCreateIn, SaveUpdateIn
from clicker_server.services.saves.service import SaveService

from tests.factories.save import SaveFactory
from tests.factories.user import UserFactory


@pytest.fixture()
def service(session) -> SaveService:
    return SaveService()


def test_create_and_get(service, session):
    user = UserFactory()
    session.commit()

    created = service.create(SaveCreateIn(user_id=user.id, savedata="AAAA"))
    fetched = service.get(created.id)

    assert fetched.id == created.id
    assert fetched.user_id == user.id
    assert fetched.savedata == "AAAA"


def test_second_save_for_same_user_conflicts(service, session):
    save = SaveFactory()
    session.commit()
    with pytest.raises(ConflictError):
        service.create(SaveCreateIn(user_id=save.user_id, savedata="BBBB"))


def test_get_missing_save(service):
    with pytest.raises(NotFoundError):
        service.get(uuid4())


def test_update_overwrites_payload(service, session):
    save = SaveFactory(savedata="old")
    session.commit()

    out = service.update(SaveUpdateIn(save_id=save.id, user_id=save.user_id, savedata="new"))

    assert out.savedata == "new"
    assert service.get(save.id).savedata == "new"


def test_update_missing_save(service, session):
    user = UserFactory()
    session.commit()
    with pytest.raises(NotFoundError):
        service.update(SaveUpdateIn(save_id=uuid4(), user_id=user.id, savedata="x"))


def test_update_someone_elses_save_is_forbidden(service, session):
    save = SaveFactory(savedata="mine")
    intruder = UserFactory()
    session.commit()

    with pytest.raises(AuthorizationError):
        service.update(SaveUpdateIn(save_id=save.id, user_id=intruder.id, savedata="theirs"))
    assert service.get(save.id).savedata == "mine"
