"""Logging setup for Smart Budget.

Modules log through ``logging.getLogger(__name__)``; this configures the
``smart_budget`` namespace once for command-line use, rendering records
with rich on stderr.

Environment variables:
    SMART_BUDGET_LOG_LEVEL: DEBUG, INFO, WARNING or ERROR. Overrides config
        but not an explicit level such as the --verbose flag.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAMESPACE = "smart_budget"
DEFAULT_LOG_LEVEL = logging.WARNING

LOG_FORMAT = "[%(name)s] %(message)s"

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_handler: RichHandler | None = None


def _parse_level(level: int | str | None) -> int | None:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        return LEVELS.get(level.upper())
    return None


def resolve_level(level: int | str | None = None, fallback: int | str | None = None) -> int:
    """Pick a level: explicit argument, then environment, then fallback, then default.

    Args:
        level: Level asked for directly (e.g. by a command-line flag)
        fallback: Level from configuration
    """
    for candidate in (level, os.environ.get("SMART_BUDGET_LOG_LEVEL"), fallback):
        resolved = _parse_level(candidate)
        if resolved is not None:
            return resolved
    return DEFAULT_LOG_LEVEL


def configure_logging(level: int | str | None = None, fallback: int | str | None = None) -> int:
    """Attach a stderr handler to the smart_budget logger.

    Calling it again only changes the level.

    Returns:
        The level that was applied
    """
    global _handler

    resolved = resolve_level(level, fallback)
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(resolved)

    if _handler is None:
        _handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=resolved == logging.DEBUG,
        )
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_handler)

    return resolved
