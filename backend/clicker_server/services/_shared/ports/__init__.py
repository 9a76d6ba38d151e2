"""
clicker_server.services._shared.ports
=====================================

Collection of *ports* (hexagonal interfaces) that define the contracts
the authentication core needs from the outside world.

Modules
-------
- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher`: salted, adaptive-cost hashing.

- :mod:`token_codec`:
    Defines :class:`~.AccessTokenCodec`: signed, stateless access tokens.

- :mod:`credential_store`:
    Defines :class:`~.UserStore`, :class:`~.RefreshTokenRecords` and
    :class:`~.CredentialStore` plus the :class:`~.InMemoryCredentialStore`
    fake used by unit tests.

Design Notes
------------
Concrete adapters (werkzeug hashing, PyJWT, SQLAlchemy, Redis) live under
``clicker_server.infra`` and are chosen by the application factory.
"""

from __future__ import annotations

from .credential_store import (
    CredentialStore,
    InMemoryCredentialStore,
    RefreshTokenRecord,
    RefreshTokenRecords,
    UserRecord,
    UserStore,
    utc_now,
)
from .password_hasher import PasswordHasher
from .token_codec import AccessTokenCodec

__all__ = [
    "AccessTokenCodec",
    "CredentialStore",
    "InMemoryCredentialStore",
    "PasswordHasher",
    "RefreshTokenRecord",
    "RefreshTokenRecords",
    "UserRecord",
    "UserStore",
    "utc_now",
]
