"""Service layer public API.

Re-exports
----------
- :class:`BaseService` (from ``clicker_server.services._shared.base``)
- Authentication (from ``clicker_server.services.auth``)
    * :class:`AuthenticationGateway`, :class:`RefreshTokenStore`
    * DTOs: :class:`CredentialsIn`, :class:`UserPublicOut`, :class:`LoginOut`,
      :class:`RefreshOut`, :class:`AuthTokenConfig`
- Save data (from ``clicker_server.services.saves``)
    * :class:`SaveService`
    * DTOs: :class:`SaveCreateIn`, :class:`SaveUpdateIn`, :class:`SaveOut`
"""

from __future__ import annotations

from ._shared.base import BaseService
from .auth.dto import AuthTokenConfig, CredentialsIn, LoginOut, RefreshOut, UserPublicOut
from .auth.refresh_tokens import RefreshTokenStore
from .auth.service import AuthenticationGateway
from .saves.dto import SaveCreateIn, SaveOut, SaveUpdateIn
from .saves.service import SaveService

__all__ = [
    "BaseService",
    # Auth
    "AuthenticationGateway",
    "RefreshTokenStore",
    "CredentialsIn",
    "UserPublicOut",
    "LoginOut",
    "RefreshOut",
    "AuthTokenConfig",
    # Saves
    "SaveService",
    "SaveCreateIn",
    "SaveUpdateIn",
    "SaveOut",
]
