"""
Logging configuration module.

This module provides logging configuration with support for:
- Console logging with a detailed text format (development)
- JSON logging (production, for log aggregation)

The toolkit itself only emits DEBUG records; applications embedding it
decide whether and how to surface them by calling :func:`setup_logging`.
"""

import logging
import logging.config
import sys
from typing import Any

from domainkit.core.config import Settings, settings as default_settings


def setup_logging(settings: Settings | None = None) -> None:
    """
    Configure toolkit logging based on settings.

    Call this function at application startup, before any logging occurs.

    Args:
        settings: Settings to configure from (defaults to the module settings)
    """
    settings = settings or default_settings

    logging.config.dictConfig(get_logging_config(settings))

    logger = logging.getLogger(__name__)
    logger.info(
        f"Logging configured: level={settings.log_level}, "
        f"format={settings.log_format}"
    )


def get_logging_config(settings: Settings | None = None) -> dict[str, Any]:
    """
    Get logging configuration dictionary.

    Args:
        settings: Settings to configure from (defaults to the module settings)

    Returns:
        Dictionary compatible with logging.config.dictConfig()
    """
    settings = settings or default_settings

    formatter = "json" if settings.log_format == "json" else "detailed"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": (
                    "%(asctime)s - %(name)s - %(levelname)s - "
                    "[%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": (
                    "%(asctime)s %(name)s %(levelname)s %(filename)s "
                    "%(lineno)d %(funcName)s %(message)s"
                ),
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": settings.log_level,
                "formatter": formatter,
                "stream": sys.stdout,
            },
        },
        "root": {
            "level": settings.log_level,
            "handlers": ["console"],
        },
        "loggers": {
            "domainkit": {
                "level": "DEBUG" if settings.debug else settings.log_level,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    This is a convenience function that wraps logging.getLogger()
    and ensures consistent logger naming across the toolkit.

    Args:
        name: Logger name, typically __name__ of the module

    Returns:
        Logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.debug("Factory built")
    """
    return logging.getLogger(name)
