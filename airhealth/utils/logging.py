"""Logging helpers."""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "airhealth"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Send log records to stderr; stdout is reserved for command output."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        level=level,
        stream=sys.stderr,
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
