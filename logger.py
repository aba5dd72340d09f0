"""
logger.py

Responsibility: Configures Python logging for the command-line tool: one
"[timestamp] [LEVEL] message" line per record, to stdout and optionally to
a log file.
Does NOT: decide what gets logged. Every module logs through its own
logging.getLogger(__name__).
"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Default level when neither --loglevel nor LOG_LEVEL is given
DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level: str | None = None, log_file: str | None = None) -> None:
    """
    Installs the console handler (and a file handler if requested) on the
    root logger, replacing any handlers installed earlier.

    Args:
        level: Level name such as "DEBUG" or "warning"; defaults to
               LOG_LEVEL from the environment, then INFO.
        log_file: Optional path of a file to append log lines to. Its
                  directory is created when missing.

    Returns:
        None

    Raises:
        ValueError: If level is not a known logging level name.
    """
    name = (level or DEFAULT_LEVEL).upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(numeric)
