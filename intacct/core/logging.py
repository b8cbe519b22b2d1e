"""Logging configuration for the client."""

import logging
import sys
from typing import Any, Optional

from intacct.core.config import settings

ROOT_LOGGER = "intacct"


def setup_logging(debug: Optional[bool] = None) -> None:
    """Configure client logging.

    Attaches a console handler to the ``intacct`` logger. The level follows
    ``debug`` or, when omitted, the debug setting.
    """
    if debug is None:
        debug = settings.debug
    log_level = logging.DEBUG if debug else logging.INFO

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    client_logger = logging.getLogger(ROOT_LOGGER)
    client_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in client_logger.handlers[:]:
        client_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    client_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``intacct`` namespace.

    Usage:
        logger = get_logger(__name__)
        logger.info("Refreshing session")
    """
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


class LoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds context to log messages.

    Usage:
        logger = LoggerAdapter(get_logger(__name__), {"controlid": "abc"})
        logger.info("Sending request")  # Logs: "Sending request - controlid=abc"
    """

    def process(self, msg: str, kwargs: Any) -> tuple[str, Any]:
        extra = " - ".join(f"{k}={v}" for k, v in self.extra.items())
        return f"{msg} - {extra}" if extra else msg, kwargs
