import logging

from flask import Flask
from flask.logging import default_handler

PACKAGE_LOGGER = "nginx_cache"


def configure_logging(app: Flask) -> logging.Logger:
    """Send the package loggers through Flask's handler at LOG_LEVEL."""
    logger = logging.getLogger(PACKAGE_LOGGER)

    level = getattr(logging, str(app.config.get("LOG_LEVEL") or "INFO").upper(), None)
    logger.setLevel(level if isinstance(level, int) else logging.INFO)

    if default_handler not in logger.handlers:
        logger.addHandler(default_handler)

    return logger
