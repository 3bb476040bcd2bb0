"""Logging setup for report runs."""

from __future__ import annotations

import logging

PACKAGE_LOGGER_NAME = "swiftlint_report"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Attach a single stream handler to the package logger."""
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level)
    # Avoid duplicate handlers when called twice
    if not any(isinstance(handler, logging.StreamHandler) for handler in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    return package_logger
