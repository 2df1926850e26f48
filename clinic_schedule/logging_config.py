"""Application-wide logging configuration."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "clinic_schedule"
DEFAULT_LOG_LEVEL = logging.WARNING

_LOGGER_INITIALIZED = False


def configure_logging(level: int | str = DEFAULT_LOG_LEVEL, console: Console | None = None) -> logging.Logger:
    """Configure the shared application logger and return it."""
    global _LOGGER_INITIALIZED
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if _LOGGER_INITIALIZED:
        return logger

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)

    _LOGGER_INITIALIZED = True
    logger.debug("Logging initialized at level %s", logging.getLevelName(logger.level))
    return logger
