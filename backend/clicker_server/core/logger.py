"""JSON logging for the auth service: request correlation and credential redaction."""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = ("X-Request-ID", "X-Correlation-ID")

# Inbound ids are echoed into logs and headers; anything else is replaced
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._:-]{1,64}$")

# Attributes passed through ``extra=`` that are copied into the JSON payload
EXTRA_KEYS = ("endpoint", "elapsed_ms", "error_kind", "user_id")

REDACTED = "[redacted]"
_CREDENTIAL_PATTERNS = (
    re.compile(r"(?i)\bbearer\s+\S+"),
    # Compact JWS: three base64url segments, header starting with '{"'
    re.compile(r"\beyJ[\w-]*\.[\w-]+\.[\w-]+"),
)


def redact(text: str) -> str:
    """Mask bearer credentials and access tokens found in ``text``."""
    for pattern in _CREDENTIAL_PATTERNS:
        text = pattern.sub(REDACTED, text)
    return text


class JSONFormatter(logging.Formatter):
    """Render a record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update({key: getattr(record, key) for key in EXTRA_KEYS if hasattr(record, key)})
        if record.exc_info:
            payload["exc_info"] = redact(self.formatException(record.exc_info))
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on every record (``None`` outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


class CredentialRedactionFilter(logging.Filter):
    """Rewrite the rendered message with credentials masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = redact(message)
        if masked != message:
            record.msg, record.args = masked, None
        return True


def _accepted(value: str | None) -> str | None:
    return value if value and _REQUEST_ID_RE.match(value) else None


def ensure_request_id() -> str:
    """Return the id of the current request, adopting or minting one once.

    A well-formed ``X-Request-ID``/``X-Correlation-ID`` from the client is
    reused; malformed values are ignored and a UUID4 is generated instead.
    Outside a request a fresh UUID4 is returned on every call.
    """
    if not has_request_context():
        return str(uuid4())
    request_id = g.get("request_id")
    if request_id is None:
        inbound = (_accepted(request.headers.get(h)) for h in CORRELATION_HEADERS)
        request_id = next((v for v in inbound if v), None) or str(uuid4())
        g.request_id = request_id
    return request_id


def configure_logging(level: str | int = "INFO") -> None:
    """Send root logging to stdout as redacted, correlated JSON."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())
    handler.addFilter(CredentialRedactionFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    root.setLevel(level)


def init_app(app: Flask) -> None:
    """Seed a request id per request and echo it back on every response."""
    app.logger.addFilter(RequestIdFilter())
    app.logger.addFilter(CredentialRedactionFilter())

    @app.before_request
    def _seed_request_id() -> None:
        # ``g`` lives on the app context, which may span several requests
        g.pop("request_id", None)
        ensure_request_id()

    @app.after_request
    def _inject_response_header(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = [
    "CredentialRedactionFilter",
    "configure_logging",
    "ensure_request_id",
    "init_app",
    "redact",
]
