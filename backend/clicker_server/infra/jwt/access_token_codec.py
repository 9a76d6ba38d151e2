"""
PyJWT-backed access token codec.

Wire format: ``base64url(header).base64url(claims).base64url(signature)``,
HS256, claims ``{iss, sub, iat, exp}`` in Unix-epoch seconds.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

import jwt

from clicker_server.services._shared.errors import (
    TokenExpiredError,
    TokenInvalidSignatureError,
    TokenIssuerMismatchError,
    TokenMalformedError,
)
from clicker_server.services._shared.ports import AccessTokenCodec, utc_now

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ("iss", "sub", "iat", "exp")


@dataclass(slots=True)
class JWTAccessTokenCodec(AccessTokenCodec):
    """
    Issue and validate HMAC-SHA256 signed access tokens.

    PyJWT verifies the signature and the presence of the required claims;
    issuer and expiry are checked here, in that order, against the injected
    clock so the ``exp`` boundary is exact (``now >= exp`` is expired).

    Claims are whole epoch seconds: ``iat`` is the issue time rounded down
    and ``exp = iat + ttl``, so the lifetime is measured from the rounded-down
    ``iat`` and a token can expire up to one second before
    ``issue time + ttl``.
    """

    clock: Callable[[], datetime] = field(default=utc_now)

    def issue(
        self,
        user_id: UUID,
        *,
        signing_secret: str,
        issuer: str,
        ttl: timedelta,
    ) -> str:
        now = int(self.clock().timestamp())
        claims: dict[str, Any] = {
            "iss": issuer,
            "sub": str(user_id),
            "iat": now,
            "exp": now + int(ttl.total_seconds()),
        }
        return jwt.encode(claims, signing_secret, algorithm=ALGORITHM)

    def validate(self, token: str, *, signing_secret: str, issuer: str) -> UUID:
        claims = self._verified_claims(token, signing_secret)

        if claims["iss"] != issuer:
            raise TokenIssuerMismatchError()

        exp = claims["exp"]
        if not isinstance(exp, int | float):
            raise TokenMalformedError("Token 'exp' claim is not numeric.")
        if self.clock().timestamp() >= exp:
            raise TokenExpiredError()

        try:
            return UUID(str(claims["sub"]))
        except ValueError as exc:
            raise TokenMalformedError("Token subject is not a user id.") from exc

    @staticmethod
    def _verified_claims(token: str, signing_secret: str) -> dict[str, Any]:
        """Decode ``token`` verifying the MAC only; no claim is trusted before this."""
        try:
            return jwt.decode(
                token,
                signing_secret,
                algorithms=[ALGORITHM],
                options={
                    "require": list(REQUIRED_CLAIMS),
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "verify_iss": False,
                },
            )
        except jwt.InvalidSignatureError as exc:
            raise TokenInvalidSignatureError() from exc
        except jwt.InvalidTokenError as exc:
            # DecodeError, MissingRequiredClaimError, InvalidAlgorithmError, ...
            raise TokenMalformedError() from exc
