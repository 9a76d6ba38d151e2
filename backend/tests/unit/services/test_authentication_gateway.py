# tests/unit/services/test_authentication_gateway.py
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta
from uuid import uuid4

import pytest
from clicker_server.infra.jwt.access_token_codec import JWTAccessTokenCodec
from clicker_server.infra.security.password_hasher import WerkzeugPasswordHasher
from clicker_server.services._shared.errors import (
    HashingFailureError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    StoreFailureError,
    TokenExpiredError,
    TokenInvalidSignatureError,
    TokenNotFoundError,
    TokenRevokedError,
    UsernameTakenError,
)
from clicker_server.services._shared.ports import InMemoryCredentialStore
from clicker_server.services.auth.dto import AuthTokenConfig, CredentialsIn, LoginOut
from clicker_server.services.auth.refresh_tokens import RefreshTokenStore
from clicker_server.services.auth.service import AuthenticationGateway

from tests.helpers.utils import T0, Clock, assert_not_logged

CFG = AuthTokenConfig(signing_secret="gateway-test-secret-with-32-plus-bytes", issuer="clicker")


class RefreshWriteFailingStore(InMemoryCredentialStore):
    def store_refresh_token(self, **_):
        raise StoreFailureError()


class CorruptHashStore(InMemoryCredentialStore):
    """Returns users whose stored hash uses an unknown algorithm."""

    def get_user_by_username(self, username):
        user = super().get_user_by_username(username)
        if user is None:
            return None
        return replace(user, hashed_password="rot13$salt$deadbeef")


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def clock() -> Clock:
    return Clock(T0)


def _gateway(store: InMemoryCredentialStore, clock: Clock) -> AuthenticationGateway:
    return AuthenticationGateway(
        users=store,
        hasher=WerkzeugPasswordHasher(method="pbkdf2:sha256:1000"),
        tokens=JWTAccessTokenCodec(clock=clock),
        refresh_tokens=RefreshTokenStore(store, clock=clock),
        token_cfg=CFG,
        clock=clock,
    )


@pytest.fixture()
def store(clock) -> InMemoryCredentialStore:
    return InMemoryCredentialStore(clock=clock)


@pytest.fixture()
def gateway(store, clock) -> AuthenticationGateway:
    """Gateway wired to the in-memory store and a controllable clock."""
    return _gateway(store, clock)


@pytest.fixture()
def alice(gateway):
    return gateway.register(CredentialsIn(username="alice", password="pw1"))


# -------------------------------- Register -------------------------------- #
def test_register_returns_public_user(gateway, store):
    user = gateway.register(CredentialsIn(username="alice", password="pw1"))
    assert user.username == "alice"
    assert not hasattr(user, "hashed_password")
    assert store.get_user_by_username("alice").hashed_password != "pw1"


def test_register_duplicate_username(gateway, alice):
    with pytest.raises(UsernameTakenError):
        gateway.register(CredentialsIn(username="alice", password="other"))


# --------------------------------- Login ---------------------------------- #
def test_login_issues_session(gateway, alice, store):
    out = gateway.login(CredentialsIn(username="alice", password="pw1"))

    assert isinstance(out, LoginOut)
    assert out.user_id == alice.id
    assert out.save_id is None
    assert gateway.authenticate(out.access_token) == alice.id

    record = store.get_refresh_token(out.refresh_token)
    assert record.user_id == alice.id
    assert record.expires_at == T0 + timedelta(days=60)
    assert record.revoked_at is None


def test_login_returns_existing_save_id(gateway, alice, store):
    save_id = store.link_save(alice.id)
    out = gateway.login(CredentialsIn(username="alice", password="pw1"))
    assert out.save_id == save_id


def test_login_twice_yields_independent_refresh_tokens(gateway, alice):
    a = gateway.login(CredentialsIn(username="alice", password="pw1"))
    b = gateway.login(CredentialsIn(username="alice", password="pw1"))
    assert a.refresh_token != b.refresh_token

    gateway.revoke(a.refresh_token)
    gateway.refresh(b.refresh_token)


def test_login_failures_are_indistinguishable(gateway, alice):
    with pytest.raises(InvalidCredentialsError) as wrong_pw:
        gateway.login(CredentialsIn(username="alice", password="wrong"))
    with pytest.raises(InvalidCredentialsError) as unknown:
        gateway.login(CredentialsIn(username="nobody", password="pw1"))

    assert type(wrong_pw.value) is type(unknown.value)
    assert str(wrong_pw.value) == str(unknown.value)
    assert wrong_pw.value.kind == unknown.value.kind == "InvalidCredentials"


def test_login_matches_username_exactly(gateway, alice):
    with pytest.raises(InvalidCredentialsError):
        gateway.login(CredentialsIn(username="  alice  ", password="pw1"))


def test_register_stores_trimmed_username(gateway):
    user = gateway.register(CredentialsIn(username="  bob ", password="pw1"))
    assert user.username == "bob"
    assert gateway.login(CredentialsIn(username="bob", password="pw1")).user_id == user.id


def test_login_hashing_failure_is_not_invalid_credentials(clock):
    store = CorruptHashStore(clock=clock)
    gateway = _gateway(store, clock)
    gateway.register(CredentialsIn(username="alice", password="pw1"))
    with pytest.raises(HashingFailureError):
        gateway.login(CredentialsIn(username="alice", password="pw1"))


def test_login_fails_when_refresh_token_cannot_be_persisted(clock):
    store = RefreshWriteFailingStore(clock=clock)
    gateway = _gateway(store, clock)
    gateway.register(CredentialsIn(username="alice", password="pw1"))

    with pytest.raises(StoreFailureError):
        gateway.login(CredentialsIn(username="alice", password="pw1"))


# -------------------------------- Refresh --------------------------------- #
def test_refresh_mints_new_access_token_without_rotation(gateway, alice, clock):
    out = gateway.login(CredentialsIn(username="alice", password="pw1"))

    clock.now = T0 + timedelta(minutes=30)
    first = gateway.refresh(out.refresh_token)
    second = gateway.refresh(out.refresh_token)

    assert gateway.authenticate(first.access_token) == alice.id
    assert gateway.authenticate(second.access_token) == alice.id
    assert first.access_token != out.access_token


def test_access_token_expires_after_one_hour(gateway, alice, clock):
    out = gateway.login(CredentialsIn(username="alice", password="pw1"))
    clock.now = T0 + timedelta(hours=1)
    with pytest.raises(TokenExpiredError):
        gateway.authenticate(out.access_token)


@pytest.mark.parametrize(
    ("setup", "cause"),
    [
        (lambda gw, clock, rt: None, TokenNotFoundError),
        (lambda gw, clock, rt: gw.revoke(rt), TokenRevokedError),
        (lambda gw, clock, rt: setattr(clock, "now", T0 + timedelta(days=60)), TokenExpiredError),
    ],
    ids=["not-found", "revoked", "expired"],
)
def test_refresh_failures_are_coarsened(gateway, alice, clock, caplog, setup, cause):
    out = gateway.login(CredentialsIn(username="alice", password="pw1"))
    token = out.refresh_token if cause is not TokenNotFoundError else "unknown-token"
    setup(gateway, clock, out.refresh_token)

    with caplog.at_level(logging.INFO), pytest.raises(InvalidRefreshTokenError) as info:
        gateway.refresh(token)

    assert isinstance(info.value.__cause__, cause)
    rejected = [r for r in caplog.records if r.getMessage() == "auth.refresh.rejected"]
    assert rejected and rejected[0].error_kind == cause.kind
    assert_not_logged(caplog, token)


# -------------------------------- Revoke ---------------------------------- #
def test_revoke_is_idempotent(gateway, alice):
    out = gateway.login(CredentialsIn(username="alice", password="pw1"))
    gateway.revoke(out.refresh_token)
    gateway.revoke(out.refresh_token)


def test_revoke_unknown_token(gateway):
    with pytest.raises(TokenNotFoundError):
        gateway.revoke("never-issued")


# ----------------------------- End to end --------------------------------- #
def test_full_session_lifecycle(gateway, store, clock):
    """register -> login -> authenticate -> refresh -> revoke -> refresh fails."""
    alice = gateway.register(CredentialsIn(username="alice", password="pw1"))
    session = gateway.login(CredentialsIn(username="alice", password="pw1"))
    assert gateway.authenticate(session.access_token) == alice.id

    clock.now = T0 + timedelta(hours=2)
    fresh = gateway.refresh(session.refresh_token)
    assert gateway.authenticate(fresh.access_token) == alice.id

    gateway.revoke(session.refresh_token)
    with pytest.raises(InvalidRefreshTokenError):
        gateway.refresh(session.refresh_token)

    # Access tokens already issued stay valid until their own expiry
    assert gateway.authenticate(fresh.access_token) == alice.id


def test_tokens_from_other_secret_are_rejected(gateway, alice, clock):
    other = AuthenticationGateway(
        users=InMemoryCredentialStore(),
        hasher=WerkzeugPasswordHasher(method="pbkdf2:sha256:1000"),
        tokens=JWTAccessTokenCodec(clock=clock),
        refresh_tokens=RefreshTokenStore(InMemoryCredentialStore(), clock=clock),
        token_cfg=AuthTokenConfig(signing_secret="x" * 40, issuer=CFG.issuer),
        clock=clock,
    )
    out = gateway.login(CredentialsIn(username="alice", password="pw1"))
    with pytest.raises(TokenInvalidSignatureError):
        other.authenticate(out.access_token)


def test_whoami_unknown_user(gateway):
    with pytest.raises(InvalidCredentialsError):
        gateway.whoami(uuid4())


def test_config_repr_masks_secret():
    assert CFG.signing_secret not in repr(CFG)
    assert "pw1" not in repr(CredentialsIn(username="alice", password="pw1"))
