"""
Logging for StudyVault.

``app.logger`` and every ``logging.getLogger(__name__)`` inside the package
share the ``studyvault_app`` logger, so handlers are installed once, there.
Console output always; a size-rotated ``studyvault.log`` when a log
directory is configured.
"""

import logging
import logging.handlers
import os
from typing import Optional

ROOT_LOGGER_NAME = 'studyvault_app'
LOG_FILE_NAME = 'studyvault.log'
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

TEXT_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
JSON_FORMAT = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'


def _formatter(json_format: bool) -> logging.Formatter:
    return logging.Formatter(JSON_FORMAT if json_format else TEXT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')


def _file_handler(log_dir: str) -> logging.Handler:
    os.makedirs(log_dir, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, LOG_FILE_NAME),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding='utf-8',
    )


def setup_logging(app=None, log_level: str = 'INFO', log_dir: Optional[str] = None,
                  json_format: bool = False) -> logging.Logger:
    """(Re)install the package handlers and return the package logger.

    Calling it again, e.g. for a second app in the test suite, replaces the
    previous handlers instead of stacking them.
    """
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler()]
    if log_dir:
        handlers.append(_file_handler(log_dir))

    formatter = _formatter(json_format)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if app is not None:
        # Request lines from the dev server are noise at INFO.
        logging.getLogger('werkzeug').setLevel(logging.WARNING)

    logger.debug("Logging ready (level=%s, file=%s)", logging.getLevelName(level), log_dir or 'none')
    return logger
