"""Logging setup shared by the CLI commands and the web server."""

import sys
from pathlib import Path

from loguru import logger

# Request failures are logged with a correlation id, so the file keeps timestamps.
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> None:
    """Log to stderr, and also to ``log_file`` when given."""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(sys.stderr, level=level, format="{level.icon} {message}")
    if log_file is not None:
        logger.add(log_file, level=level, format=FILE_FORMAT, rotation="1 MB", encoding="utf-8")
