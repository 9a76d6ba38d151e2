from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """Port for one-way, salted, adaptive-cost password hashing."""

    def hash(self, plaintext: str) -> str:
        """
        Hash ``plaintext``.

        :raises HashingFailureError: On internal algorithm failure only.
        """
        ...

    def verify(self, hashed: str, plaintext: str) -> None:
        """
        Check ``plaintext`` against ``hashed`` in constant time.

        :raises PasswordMismatchError: When the password does not match.
        :raises HashingFailureError: On internal algorithm failure.
        """
        ...
