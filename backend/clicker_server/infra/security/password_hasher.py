from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from clicker_server.services._shared.errors import HashingFailureError, PasswordMismatchError
from clicker_server.services._shared.ports import PasswordHasher

DEFAULT_METHOD = "scrypt:32768:8:1"
SALT_LENGTH = 16


@dataclass(frozen=True, slots=True)
class WerkzeugPasswordHasher(PasswordHasher):
    """
    Adapter over :mod:`werkzeug.security`.

    The ``method`` string pins the algorithm and its cost parameters
    (``scrypt:N:r:p`` or ``pbkdf2:sha256:iterations``); the salt is random per
    hash and embedded in the result. Verification goes through
    ``hmac.compare_digest`` inside werkzeug, so it is constant-time.

    Hashing holds no lock; concurrent requests hash in parallel.
    """

    method: str = DEFAULT_METHOD

    def hash(self, plaintext: str) -> str:
        try:
            return generate_password_hash(plaintext, method=self.method, salt_length=SALT_LENGTH)
        except (ValueError, MemoryError) as exc:
            # Unknown method / unsupported cost on this platform
            raise HashingFailureError() from exc

    def verify(self, hashed: str, plaintext: str) -> None:
        try:
            matched = check_password_hash(hashed, plaintext)
        except (ValueError, MemoryError) as exc:
            raise HashingFailureError() from exc
        if not matched:
            raise PasswordMismatchError()
