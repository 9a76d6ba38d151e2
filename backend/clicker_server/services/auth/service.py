# clicker_server/services/auth/service.py
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from uuid import UUID

from clicker_server.services._shared.base import BaseService
from clicker_server.services._shared.errors import (
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    PasswordMismatchError,
    TokenExpiredError,
    TokenNotFoundError,
    TokenRevokedError,
)
from clicker_server.services._shared.ports import (
    AccessTokenCodec,
    PasswordHasher,
    UserRecord,
    UserStore,
    utc_now,
)
from clicker_server.services.auth.dto import (
    ACCESS_TOKEN_TTL,
    REFRESH_TOKEN_TTL,
    AuthTokenConfig,
    CredentialsIn,
    LoginOut,
    RefreshOut,
    UserPublicOut,
)
from clicker_server.services.auth.refresh_tokens import RefreshTokenStore

log = logging.getLogger(__name__)


class AuthenticationGateway(BaseService):
    """
    Authentication lifecycle service (register / login / refresh / revoke).

    Issues stateless access tokens through an :class:`AccessTokenCodec` and
    manages stateful refresh tokens through a :class:`RefreshTokenStore`.
    It holds no mutable state of its own: the signing configuration is
    immutable and every durable fact lives in the stores.

    Failures are raised as :class:`~clicker_server.services._shared.errors.AuthError`
    subclasses and never recovered from here.
    """

    def __init__(
        self,
        *,
        users: UserStore,
        hasher: PasswordHasher,
        tokens: AccessTokenCodec,
        refresh_tokens: RefreshTokenStore,
        token_cfg: AuthTokenConfig,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize the gateway with its collaborators.

        :param users: User lookup/creation store.
        :param hasher: Password hasher.
        :param tokens: Access token codec.
        :param refresh_tokens: Refresh token lifecycle component.
        :param token_cfg: Signing secret and issuer.
        :param clock: Source of "now" (UTC).
        """
        super().__init__(clock=clock)
        self.users = users
        self.hasher = hasher
        self.tokens = tokens
        self.refresh_tokens = refresh_tokens
        self.cfg = token_cfg

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: CredentialsIn) -> UserPublicOut:
        """
        Create a user with a hashed password.

        :raises HashingFailureError: If hashing fails.
        :raises UsernameTakenError: If the username exists.
        :raises StoreFailureError: On persistence failure.
        """
        hashed = self.hasher.hash(dto.password)
        user = self.users.create_user(username=dto.username.strip(), hashed_password=hashed)
        log.info("auth.register", extra={"user_id": str(user.id)})
        return self._to_public(user)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: CredentialsIn) -> LoginOut:
        """
        Authenticate credentials and open a session.

        The refresh token is persisted before anything is returned; if that
        fails the freshly minted access token is dropped and the whole call
        fails with :class:`StoreFailureError`.

        :raises InvalidCredentialsError: Unknown user or wrong password.
        """
        user = self.users.get_user_by_username(dto.username)
        if user is None:
            raise InvalidCredentialsError()
        try:
            self.hasher.verify(user.hashed_password, dto.password)
        except PasswordMismatchError as exc:
            raise InvalidCredentialsError() from exc

        access = self._issue_access_token(user.id)

        # StoreFailureError propagates; the access token above is never handed out
        refresh = self.refresh_tokens.generate()
        self.refresh_tokens.persist(refresh, user.id, self.now_utc() + REFRESH_TOKEN_TTL)

        # No save yet means a brand-new player, not an error
        save_id = self.users.get_save_id_for_user(user.id)

        log.info("auth.login", extra={"user_id": str(user.id)})
        return LoginOut(
            user=self._to_public(user),
            access_token=access,
            refresh_token=refresh,
            save_id=save_id,
        )

    # ------------------------------------------------------------------ #
    # Refresh (no rotation: the refresh token stays valid until expiry/revoke)
    # ------------------------------------------------------------------ #

    def refresh(self, refresh_token: str) -> RefreshOut:
        """
        Mint a new access token from a usable refresh token.

        :raises InvalidRefreshTokenError: Token not found, revoked or expired.
        :raises StoreFailureError: On persistence failure.
        """
        try:
            user_id = self.refresh_tokens.resolve(refresh_token)
        except (TokenNotFoundError, TokenRevokedError, TokenExpiredError) as exc:
            # Precise reason is internal only
            log.info("auth.refresh.rejected", extra={"error_kind": exc.kind})
            raise InvalidRefreshTokenError() from exc

        return RefreshOut(access_token=self._issue_access_token(user_id))

    # ------------------------------------------------------------------ #
    # Revoke
    # ------------------------------------------------------------------ #

    def revoke(self, refresh_token: str) -> None:
        """
        Revoke a refresh token (idempotent).

        :raises TokenNotFoundError: Unknown token.
        :raises StoreFailureError: On persistence failure.
        """
        self.refresh_tokens.revoke(refresh_token)
        log.info("auth.revoke")

    # ------------------------------------------------------------------ #
    # Access token checks (used by the HTTP layer)
    # ------------------------------------------------------------------ #

    def authenticate(self, access_token: str) -> UUID:
        """Validate an access token and return its user id."""
        return self.tokens.validate(
            access_token,
            signing_secret=self.cfg.signing_secret,
            issuer=self.cfg.issuer,
        )

    def whoami(self, user_id: UUID) -> UserPublicOut:
        """
        Return the public profile of an authenticated user.

        :raises InvalidCredentialsError: If the user no longer exists.
        """
        user = self.users.get_user_by_id(user_id)
        if user is None:
            raise InvalidCredentialsError("User no longer exists.")
        return self._to_public(user)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _issue_access_token(self, user_id: UUID) -> str:
        return self.tokens.issue(
            user_id,
            signing_secret=self.cfg.signing_secret,
            issuer=self.cfg.issuer,
            ttl=ACCESS_TOKEN_TTL,
        )

    @staticmethod
    def _to_public(user: UserRecord) -> UserPublicOut:
        return UserPublicOut(
            id=user.id,
            username=user.username,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
