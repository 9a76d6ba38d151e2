"""Application factory wiring Flask extensions, auth components and blueprints."""

from __future__ import annotations

from flask import Flask

from clicker_server.core.config import BaseConfig, get_config
from clicker_server.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object, class or import path; defaults to the class
        selected by ``APP_ENV``.
    :raises RuntimeError: When the signing secret is unusable for this
        environment or a configured store cannot be reached.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from clicker_server.core import middleware

    middleware.init_app(app)

    from clicker_server.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from clicker_server.core import container

    container.init_app(app)

    from clicker_server.api import init_app as init_api

    init_api(app)

    from clicker_server.core import errors

    errors.init_app(app)

    from clicker_server import cli as app_cli

    app_cli.init_app(app)

    return app
