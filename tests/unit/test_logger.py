"""
tests/unit/test_logger.py

Unit tests for logger.py. The restore_logging fixture puts pytest's own
handlers back after each test.
"""

from __future__ import annotations

import logging

import pytest

from logger import configure_logging


def test_configure_logging_sets_level(restore_logging):
    """The level name is case-insensitive and applied to the root logger."""
    configure_logging("debug")
    assert restore_logging.level == logging.DEBUG


def test_configure_logging_writes_log_file(restore_logging, tmp_path):
    """Log lines go to the requested file in the '[time] [LEVEL] message' format."""
    log_file = tmp_path / "logs" / "ddns.log"
    configure_logging("INFO", str(log_file))

    logging.getLogger("tests.logger").info("provider loaded")
    for handler in restore_logging.handlers:
        handler.flush()

    line = log_file.read_text(encoding="utf-8").strip()
    assert line.endswith("[INFO] provider loaded")
    assert line.startswith("[")


def test_configure_logging_rejects_unknown_level(restore_logging):
    """An unknown level name raises ValueError."""
    with pytest.raises(ValueError):
        configure_logging("chatty")
