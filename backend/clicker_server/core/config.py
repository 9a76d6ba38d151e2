"""Application settings with environment-based simple classes."""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from typing import Any, Final

from dotenv import load_dotenv
from sqlalchemy.engine import make_url

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

PLACEHOLDER_JWT_SECRET: Final[str] = "CHANGE_ME_JWT_SECRET_AT_LEAST_32_BYTES"

# Load .env during development (no-op when the file does not exist)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_float(name: str, default: float) -> float:
    """Parse a float from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return float(val)


def engine_options(uri: str, timeout: float) -> dict[str, Any]:
    """Build SQLAlchemy engine options bounded by the store timeout.

    Parameters
    ----------
    uri: str
        Database URL; its backend selects the driver-level timeouts.
    timeout: float
        ``STORE_TIMEOUT_SECONDS``.

    Returns
    -------
    dict
        Options for ``SQLALCHEMY_ENGINE_OPTIONS``. Server databases get
        ``pool_timeout`` (connection checkout), ``pool_pre_ping`` and driver
        ``connect_args`` limiting connection setup and each statement:
        ``connect_timeout`` plus a server-side ``statement_timeout`` for
        PostgreSQL; ``connect_timeout``/``read_timeout``/``write_timeout`` for
        MySQL. SQLite only gets its lock wait (``timeout``) since its
        single-connection pool rejects ``pool_timeout``.
    """
    backend = make_url(uri).get_backend_name()
    if backend == "sqlite":
        return {"connect_args": {"timeout": timeout}}

    # Driver connect/read timeouts take whole seconds
    seconds = max(1, math.ceil(timeout))
    options: dict[str, Any] = {"pool_pre_ping": True, "pool_timeout": timeout}
    if backend == "postgresql":
        millis = max(1, int(timeout * 1000))
        options["connect_args"] = {
            "connect_timeout": seconds,
            "options": f"-c statement_timeout={millis}",
        }
    elif backend in ("mysql", "mariadb"):
        options["connect_args"] = {
            "connect_timeout": seconds,
            "read_timeout": seconds,
            "write_timeout": seconds,
        }
    return options


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    JWT_SECRET: str
        Symmetric key used to sign access tokens (HMAC-SHA256).
    JWT_ISSUER: str
        Value written to and required in the ``iss`` claim.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    REDIS_URL: str | None
        Optional Redis connection string.
    REFRESH_TOKEN_BACKEND: str
        ``"sql"`` keeps refresh tokens in the ``refresh_tokens`` table;
        ``"redis"`` keeps them in Redis (requires ``REDIS_URL``).
    STORE_TIMEOUT_SECONDS: float
        Upper bound for a single store round-trip: SQL connect, checkout and
        statement, and the Redis socket.
    PASSWORD_HASH_METHOD: str
        Werkzeug hashing method string, including its cost parameters.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are read once at import time. The application factory freezes the
    auth-relevant ones into an immutable value object, so nothing downstream
    reads them from a mutable global.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / token signing
    JWT_SECRET = os.getenv("JWT_SECRET", PLACEHOLDER_JWT_SECRET)
    JWT_ISSUER = os.getenv("JWT_ISSUER", "clicker-server")

    # Stores
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    STORE_TIMEOUT_SECONDS = env_float("STORE_TIMEOUT_SECONDS", 5.0)
    REDIS_URL = os.getenv("REDIS_URL") or None
    REFRESH_TOKEN_BACKEND = os.getenv("REFRESH_TOKEN_BACKEND", "sql").strip().lower()

    # Password hashing (scrypt, fixed cost)
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt:32768:8:1")

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Uses a cheap pbkdf2 cost so the suite stays fast.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    JWT_SECRET = "testing-secret-with-enough-bytes-for-hs256"
    JWT_ISSUER = "clicker-server-test"
    REFRESH_TOKEN_BACKEND = "sql"
    REDIS_URL = None
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    The factory refuses to boot with :data:`PLACEHOLDER_JWT_SECRET`.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
