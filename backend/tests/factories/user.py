"""Factory Boy definition for :class:`clicker_server.models.user.User`."""

from __future__ import annotations

import factory
from clicker_server.models.user import User
from werkzeug.security import generate_password_hash

from tests.factories import BaseFactory

TEST_HASH_METHOD = "pbkdf2:sha256:1000"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`User` instances.

    Notes
    -----
    - Pass ``password="..."`` to hash a known plaintext with the testing cost.
    """

    class Meta:
        model = User

    class Params:
        password = "Passw0rd!"

    username = factory.Sequence(lambda n: f"player{n}")
    hashed_password = factory.LazyAttribute(
        lambda o: generate_password_hash(o.password, method=TEST_HASH_METHOD)
    )
