"""Logging configuration for the archival access server."""

import sys

from loguru import logger


def configure_logging(*, verbose: bool = False, level: str | None = None) -> None:
    """Configure loguru with appropriate level."""
    logger.remove()
    if verbose:
        level = "DEBUG"
    logger.add(
        sys.stderr,
        level=(level or "INFO").upper(),
        format="{time:YYYY-MM-DD HH:mm:ss} {level.icon} {name}: {message}",
    )
