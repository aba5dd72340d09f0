"""
watcher.py

Responsibility: Sets up a watchdog file system observer on the configuration
file and calls back when it is written, so the caller can reload.
Does NOT: parse configuration or touch the provider registry itself.
"""

from __future__ import annotations

import logging
import os
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Event handler
# ---------------------------------------------------------------------------


class _ConfigFileHandler(FileSystemEventHandler):
    """
    Watchdog event handler for the directory holding the configuration file.

    Editors often save by writing a temp file and renaming it over the
    original, so moves onto the config path count as changes too. Events for
    other files in the directory are ignored.
    """

    def __init__(self, config_path: str, on_change: Callable[[str], None]) -> None:
        super().__init__()
        self._config_path = os.path.abspath(config_path)
        self._on_change = on_change

    def _matches(self, path: str | bytes) -> bool:
        if isinstance(path, bytes):
            path = os.fsdecode(path)
        return os.path.abspath(path) == self._config_path

    def _notify(self) -> None:
        logger.info("Configuration file changed: %s", self._config_path)
        self._on_change(self._config_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        """
        Called by watchdog when a file in the watched directory is modified.

        Args:
            event: The file system event describing what changed.

        Returns:
            None
        """
        if event.is_directory or not self._matches(event.src_path):
            return
        self._notify()

    def on_created(self, event: FileSystemEvent) -> None:
        if event.is_directory or not self._matches(event.src_path):
            return
        self._notify()

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory or not self._matches(getattr(event, "dest_path", "")):
            return
        self._notify()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def create_observer(config_path: str, on_change: Callable[[str], None]) -> Observer:
    """
    Creates and returns a configured (but not yet started) watchdog Observer.

    Args:
        config_path: The configuration file to watch. Its parent directory
                     is scheduled, non-recursively.
        on_change: Called with the absolute config path after each change,
                   on the observer's thread.

    Returns:
        A configured watchdog Observer ready to be started.
    """
    watch_dir = os.path.dirname(os.path.abspath(config_path))
    observer = Observer()
    handler = _ConfigFileHandler(config_path, on_change)
    observer.schedule(handler, path=watch_dir, recursive=False)
    logger.info("File watcher configured for: %s", config_path)
    return observer
