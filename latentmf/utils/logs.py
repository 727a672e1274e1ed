"""loguru sink configuration shared by the command-line scripts."""

from __future__ import annotations

import sys

from loguru import logger

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO", *, fmt: str = DEFAULT_FORMAT) -> int:
    """
    Replace every loguru sink with a single stderr sink at ``level``.

    Returns the id of the new sink so callers can remove it again.
    """
    logger.remove()
    return logger.add(sys.stderr, level=level.upper(), format=fmt)
