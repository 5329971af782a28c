"""StudyVault: courses, tagged questions and a guided study mode."""

from __future__ import annotations

from flask import Flask

from .config import Config
from .core import bootstrap
from .extensions import db

__all__ = ["create_app", "db"]


def create_app(config_class: type[Config] = Config) -> Flask:
    """Build the app: config, logging, extensions, error handlers, blueprints.

    Tables are created and the content cache is loaded before returning, so
    the first request already reads from a warm cache.
    """

    app = Flask(__name__)
    app.config.from_object(config_class)
    config_class.init_app(app)

    bootstrap.configure_logging(app)
    bootstrap.register_extensions(app)
    bootstrap.register_handlers(app)
    bootstrap.register_blueprints(app)

    with app.app_context():
        bootstrap.initialize_database(app)

    app.logger.info("StudyVault ready")
    return app
