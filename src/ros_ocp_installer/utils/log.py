"""Loguru sink configuration for the CLI."""

from __future__ import annotations

import sys

from loguru import logger


def configure_logging(level: str = "WARNING") -> None:
    """Route diagnostic logs to stderr at the given level.

    Console output for the user goes through rich; loguru only carries the
    debug trail (commands executed, probe outcomes).
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<dim>{time:HH:mm:ss}</dim> <level>{level: <8}</level> {message}",
    )
