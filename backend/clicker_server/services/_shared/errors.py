"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP directly. They serve as stable contracts between stores,
security components and application services.

The translation to HTTP responses (RFC 7807) is handled by
``clicker_server/core/errors.py``.

Authentication failures are :class:`AuthError` subclasses. Each carries a
stable ``kind`` string so callers can branch on (and log) the exact failure
without inspecting messages.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from stores or domain logic.
    """


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found.

    :param entity: Entity name (e.g., "Save").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "Save").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:  # pragma: no cover
        return f"Conflict on {self.entity}: {self.detail}"


class AuthorizationError(ServiceError):
    """Raised when the actor is authenticated but not allowed to act on a resource."""


class PasswordMismatchError(ServiceError):
    """Raised by a password hasher when the candidate does not match the hash."""

    def __init__(self) -> None:
        super().__init__("Password does not match.")


# --------------------------------------------------------------------------- #
# Authentication error kinds
# --------------------------------------------------------------------------- #


class AuthError(ServiceError):
    """
    Base class for authentication failures.

    :cvar kind: Stable identifier of the failure (used for logging/mapping).
    :cvar default_message: Message used when none is given.
    """

    kind = "AuthError"
    default_message = "Authentication failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidCredentialsError(AuthError):
    """Unknown username or wrong password (deliberately indistinguishable)."""

    kind = "InvalidCredentials"
    default_message = "Incorrect username or password."


class HashingFailureError(AuthError):
    """The password hashing algorithm failed internally."""

    kind = "HashingFailure"
    default_message = "Error processing password."


class TokenMalformedError(AuthError):
    """The access token cannot be parsed or lacks required claims."""

    kind = "TokenMalformed"
    default_message = "Token is malformed."


class TokenInvalidSignatureError(AuthError):
    """The access token signature does not match the signing secret."""

    kind = "TokenInvalidSignature"
    default_message = "Token signature is invalid."


class TokenIssuerMismatchError(AuthError):
    """The access token was issued by someone else."""

    kind = "TokenIssuerMismatch"
    default_message = "Token issuer is not accepted."


class TokenExpiredError(AuthError):
    """The token (access or refresh) is past its expiry."""

    kind = "TokenExpired"
    default_message = "Token has expired."


class TokenNotFoundError(AuthError):
    """The refresh token does not exist in the store."""

    kind = "TokenNotFound"
    default_message = "Token not found."


class TokenRevokedError(AuthError):
    """The refresh token was revoked."""

    kind = "TokenRevoked"
    default_message = "Token has been revoked."


class InvalidRefreshTokenError(AuthError):
    """
    Coarse refresh failure exposed to clients.

    Wraps :class:`TokenNotFoundError`, :class:`TokenRevokedError` and
    :class:`TokenExpiredError`; the precise cause stays on ``__cause__``.
    """

    kind = "InvalidRefreshToken"
    default_message = "Invalid or missing refresh token."


class MissingOrMalformedTokenError(AuthError):
    """The ``Authorization: Bearer <token>`` header is absent or malformed."""

    kind = "MissingOrMalformedToken"
    default_message = "Missing or malformed bearer token."


class StoreFailureError(AuthError):
    """The persistence layer failed (infrastructure problem, not a client error)."""

    kind = "StoreFailure"
    default_message = "Storage is temporarily unavailable."


class UsernameTakenError(AuthError):
    """Registration attempted with a username that already exists."""

    kind = "UsernameTaken"
    default_message = "Username is already taken."
