"""Logging configuration for viewcache sessions."""

import logging
import sys

from viewcache.core.config import Settings, get_settings

PACKAGE_LOGGER = "viewcache"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """Set the viewcache logger level from settings.debug (DEBUG or INFO).

    A stdout handler is attached only when neither the host application
    (root logger) nor an earlier session has configured one, so repeated
    sessions never duplicate output.
    """
    settings = settings or get_settings()
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    if not package_logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    return package_logger
