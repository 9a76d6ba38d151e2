"""WSGI/HTTP middleware wiring: reverse-proxy headers and CORS."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Apply ``ProxyFix`` (when ``USE_PROXYFIX``) and the CORS policy.

    Parameters
    ----------
    app: flask.Flask
        Application to wrap. ``CORS_ORIGINS`` is a comma-separated list; blank
        or ``"*"`` allows any origin without credentials. Game clients send
        the ``Authorization`` header, so it is always exposed to preflight.
    """
    if app.config.get("USE_PROXYFIX", True):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    raw_origins = app.config.get("CORS_ORIGINS", "") or ""
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    wildcard = len(origins) == 0 or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        supports_credentials=not wildcard,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
