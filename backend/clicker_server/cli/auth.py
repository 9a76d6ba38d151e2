"""Flask CLI commands for account and refresh-token maintenance."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from clicker_server.core.container import get_auth_gateway
from clicker_server.infra.sqlalchemy.credential_store import SQLAlchemyCredentialStore
from clicker_server.services._shared.errors import AuthError
from clicker_server.services.auth.dto import CredentialsIn

LOGGER = logging.getLogger(__name__)


@click.group("auth")
def auth_cli() -> None:
    """Account and session maintenance commands."""


@auth_cli.command("create-user")
@click.argument("username")
@click.password_option(help="Password for the new account.")
@with_appcontext
def create_user_command(username: str, password: str) -> None:
    """Create USERNAME with a prompted password."""
    try:
        user = get_auth_gateway().register(CredentialsIn(username=username, password=password))
    except AuthError as exc:
        raise click.ClickException(f"{exc.kind}: {exc}") from exc
    click.echo(f"Created user {user.username} ({user.id})")


@auth_cli.command("prune-tokens")
@with_appcontext
def prune_tokens_command() -> None:
    """Delete refresh tokens (SQL backend) that are already expired."""
    try:
        removed = SQLAlchemyCredentialStore().prune_expired()
    except AuthError as exc:
        raise click.ClickException(f"{exc.kind}: {exc}") from exc
    LOGGER.info("auth.prune_tokens", extra={"endpoint": "cli"})
    click.echo(f"Removed {removed} expired refresh token(s)")
