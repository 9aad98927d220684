"""Logging configuration for the API process."""

from __future__ import annotations

import logging
import sys


def setup_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
) -> None:
    """Configure the root handler and align the uvicorn loggers to ``level``."""
    if isinstance(level, str):
        level = level.upper()
    if format_string is None:
        format_string = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=format_string,
        stream=sys.stdout,
        force=True,
    )
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "huddle"):
        logging.getLogger(name).setLevel(level)
