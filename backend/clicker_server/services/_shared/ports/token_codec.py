from __future__ import annotations

from datetime import timedelta
from typing import Protocol
from uuid import UUID


class AccessTokenCodec(Protocol):
    """Port for issuing and validating stateless, signed access tokens."""

    def issue(
        self,
        user_id: UUID,
        *,
        signing_secret: str,
        issuer: str,
        ttl: timedelta,
    ) -> str: ...

    def validate(self, token: str, *, signing_secret: str, issuer: str) -> UUID:
        """
        Return the authenticated user id.

        Signature is checked before any claim is trusted, then ``iss``, then
        ``exp``.

        :raises TokenMalformedError: Unparseable token or missing claims.
        :raises TokenInvalidSignatureError: MAC does not match.
        :raises TokenIssuerMismatchError: ``iss`` differs from ``issuer``.
        :raises TokenExpiredError: ``now >= exp``.
        """
        ...
