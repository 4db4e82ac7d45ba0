"""Package-wide logger."""

from __future__ import annotations

import logging

logger = logging.getLogger("zander")


def configure_logging(level: str = "WARNING") -> None:
    """Send package log records to stderr at *level*."""
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logger.setLevel(level.upper())
