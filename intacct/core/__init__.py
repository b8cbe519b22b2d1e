"""Core client modules."""

from intacct.core.config import DEFAULT_DTD_VERSION, DEFAULT_ENDPOINT, Settings, settings
from intacct.core.logging import LoggerAdapter, get_logger, setup_logging

__all__ = [
    "DEFAULT_DTD_VERSION",
    "DEFAULT_ENDPOINT",
    "Settings",
    "settings",
    "LoggerAdapter",
    "get_logger",
    "setup_logging",
]
