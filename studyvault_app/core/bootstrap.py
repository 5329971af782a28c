"""Steps of the application factory, in the order `create_app` runs them."""

from __future__ import annotations

from flask import Flask

from ..extensions import db, migrate
from ..services.content_cache import ContentCache
from ..services.content_store import ContentStore
from .error_handlers import register_error_handlers
from .logging_config import setup_logging
from .module_registry import register_default_modules


def configure_logging(app: Flask) -> None:
    """Configure the package logger (which is also ``app.logger``)."""

    setup_logging(
        app,
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        log_dir=app.config.get("LOG_DIR"),
        json_format=app.config.get("LOG_JSON", False),
    )
    app.logger.propagate = False


def register_extensions(app: Flask) -> None:
    """Bind db and migrations, and attach an empty content cache."""

    db.init_app(app)
    migrate.init_app(app, db)
    app.extensions["content_cache"] = ContentCache()


def register_blueprints(app: Flask) -> None:
    names = register_default_modules(app)
    app.logger.debug("Blueprints registered: %s", ", ".join(names))


def register_handlers(app: Flask) -> None:
    """Attach the JSON error handlers."""

    register_error_handlers(app)


def initialize_database(app: Flask) -> None:
    """Create database tables and warm the content cache."""

    db.create_all()

    cache: ContentCache = app.extensions["content_cache"]
    cache.load(ContentStore())
    app.logger.info(
        "Content cache loaded: %d courses, %d questions, %d tags.",
        len(cache.courses),
        len(cache.questions),
        len(cache.tags),
    )
