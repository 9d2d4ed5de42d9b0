"""Core package: configuration and logging."""

from domainkit.core.config import Settings, get_settings, settings
from domainkit.core.logging import get_logger, setup_logging

__all__ = [
    "Settings",
    "get_logger",
    "get_settings",
    "settings",
    "setup_logging",
]
