"""Unit tests for WerkzeugPasswordHasher."""

from __future__ import annotations

import pytest
from clicker_server.infra.security.password_hasher import WerkzeugPasswordHasher
from clicker_server.services._shared.errors import HashingFailureError, PasswordMismatchError

FAST = "pbkdf2:sha256:1000"


@pytest.fixture()
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(method=FAST)


def test_hash_then_verify_accepts_same_password(hasher):
    hashed = hasher.hash("hunter2")
    assert hasher.verify(hashed, "hunter2") is None


def test_verify_rejects_other_password(hasher):
    hashed = hasher.hash("hunter2")
    with pytest.raises(PasswordMismatchError):
        hasher.verify(hashed, "hunter3")


def test_hash_is_salted(hasher):
    """Two hashes of the same password differ but both verify."""
    a = hasher.hash("same")
    b = hasher.hash("same")
    assert a != b
    hasher.verify(a, "same")
    hasher.verify(b, "same")


def test_hash_embeds_method_and_never_contains_plaintext(hasher):
    hashed = hasher.hash("plain-secret")
    assert hashed.startswith("pbkdf2:sha256:1000$")
    assert "plain-secret" not in hashed


def test_empty_password_is_hashable(hasher):
    hashed = hasher.hash("")
    hasher.verify(hashed, "")
    with pytest.raises(PasswordMismatchError):
        hasher.verify(hashed, "x")


def test_unknown_method_is_a_hashing_failure():
    with pytest.raises(HashingFailureError) as info:
        WerkzeugPasswordHasher(method="rot13").hash("pw")
    assert info.value.kind == "HashingFailure"


def test_stored_hash_with_unknown_method_is_a_hashing_failure(hasher):
    """A corrupted stored hash is an internal failure, not a mismatch."""
    with pytest.raises(HashingFailureError):
        hasher.verify("rot13$salt$abcdef", "pw")


def test_default_method_is_scrypt():
    hashed = WerkzeugPasswordHasher().hash("pw")
    assert hashed.startswith("scrypt:32768:8:1$")
