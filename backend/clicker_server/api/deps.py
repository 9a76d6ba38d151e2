"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast
from uuid import UUID

from flask import Response, current_app, g, jsonify, request

from clicker_server.core.container import get_auth_gateway
from clicker_server.services._shared.errors import MissingOrMalformedTokenError

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "Bearer "


def bearer_token() -> str:
    """Return the token of an ``Authorization: Bearer <token>`` header.

    :raises MissingOrMalformedTokenError: Header absent, not a bearer
        credential, or empty after the prefix.
    """

    header = request.headers.get("Authorization", "")
    if not header.startswith(BEARER_PREFIX):
        raise MissingOrMalformedTokenError()
    token = header[len(BEARER_PREFIX) :].strip()
    if not token or " " in token:
        raise MissingOrMalformedTokenError()
    return token


def current_user_id() -> UUID:
    """Return the user id set by :func:`require_access_token`."""

    return cast(UUID, g.user_id)


def require_access_token(func: F) -> F:
    """Ensure the request carries a valid access token and expose ``g.user_id``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.user_id = get_auth_gateway().authenticate(bearer_token())
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
