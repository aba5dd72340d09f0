"""
cli.py

Responsibility: Command-line entry point. Loads the configuration, reports
the resulting providers and, with --watch, reloads whenever the file changes.
Does NOT: run the update loop or send any HTTP request.
"""

from __future__ import annotations

import argparse
import logging
import os
import threading
import time
from typing import Sequence

from logger import configure_logging
from services.config_loader import LoadResult, load_config
from watcher import create_observer

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = os.getenv("DDNS_CONFIG", "/etc/ddns.yaml")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ddns-conf",
        description="Load and check a Dynamic DNS provider configuration.",
    )
    parser.add_argument("-f", "--config", default=DEFAULT_CONFIG,
                        help="configuration file (default: %(default)s)")
    parser.add_argument("-i", "--iface", default=None,
                        help="network interface, overrides 'iface' in the file")
    parser.add_argument("-1", "--once", action="store_true",
                        help="run a single update iteration")
    parser.add_argument("-w", "--watch", action="store_true",
                        help="keep running and reload when the file changes")
    parser.add_argument("-l", "--loglevel", default=None,
                        help="log level (default: $LOG_LEVEL or INFO)")
    parser.add_argument("--log-file", default=None, help="also append log lines to this file")
    return parser


def report(result: LoadResult) -> None:
    """
    Logs the global settings and every loaded provider.

    Args:
        result: A successful LoadResult.

    Returns:
        None
    """
    cfg = result.global_config
    logger.info(
        "period=%ds forced-update=%ds iterations=%s cache-dir=%s iface=%s",
        cfg.period,
        cfg.forced_update_period,
        cfg.total_iterations or "forever",
        cfg.cache_dir,
        cfg.iface or "default",
    )
    for record in result.registry:
        logger.info(
            "%s: update %s%s (ssl=%s), checkip %s%s, hostnames %s",
            record.title,
            record.server,
            record.server_url,
            record.ssl_enabled,
            record.checkip,
            record.checkip_url,
            ", ".join(record.hostnames),
        )


class _Reloader:
    """
    Holds the current LoadResult and swaps it on reload.

    A reload that fails keeps the previous configuration.
    """

    def __init__(self, result: LoadResult, args: argparse.Namespace) -> None:
        self._result = result
        self._args = args
        self._lock = threading.Lock()

    @property
    def result(self) -> LoadResult:
        with self._lock:
            return self._result

    def reload(self, path: str) -> None:
        fresh = load_config(path, iface=self._args.iface, once=self._args.once)
        if fresh is None:
            logger.error("Reload of %s failed, keeping previous configuration.", path)
            return
        with self._lock:
            previous, self._result = self._result, fresh
        previous.registry.destroy_all()
        report(fresh)

    def close(self) -> None:
        with self._lock:
            self._result.registry.destroy_all()


def main(argv: Sequence[str] | None = None) -> int:
    """
    Runs the command line.

    Args:
        argv: Arguments without the program name; defaults to sys.argv[1:].

    Returns:
        0 if the configuration loaded, 1 otherwise.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.loglevel, args.log_file)

    result = load_config(args.config, iface=args.iface, once=args.once)
    if result is None:
        return 1
    report(result)

    reloader = _Reloader(result, args)
    if args.watch:
        observer = create_observer(args.config, reloader.reload)
        observer.start()
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            logger.info("Stopping.")
        finally:
            observer.stop()
            observer.join()

    reloader.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
