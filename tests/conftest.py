"""
tests/conftest.py

Shared pytest fixtures used by both unit and integration test suites.
Configuration files are written to pytest's tmp_path, and HTTP handles are
replaced by MagicMock objects. No test makes a network call.
"""

from __future__ import annotations

import logging
import textwrap
from unittest.mock import MagicMock

import pytest

from ddns.conf_parser import SectionOptions
from ddns.plugins import PluginRegistry
from services.config_loader import ConfigLoader
from services.provider_builder import ProviderBuilder


# ---------------------------------------------------------------------------
# Plugins and HTTP handles
# ---------------------------------------------------------------------------


@pytest.fixture()
def plugins():
    """Yields a registry holding the built-in plugins."""
    return PluginRegistry.default()


@pytest.fixture()
def client_factory():
    """
    Yields a stand-in for create_http_client.

    Every call returns a fresh MagicMock that remembers the endpoint and
    ssl flag it was built for; the factory itself records all calls.
    """
    def _factory(endpoint, ssl):
        client = MagicMock(name=f"client-{endpoint}")
        client.endpoint = endpoint
        client.ssl = ssl
        return client

    return MagicMock(side_effect=_factory)


@pytest.fixture()
def builder(plugins, client_factory):
    return ProviderBuilder(plugins, client_factory)


@pytest.fixture()
def loader(plugins, client_factory):
    return ConfigLoader(plugins, client_factory=client_factory)


# ---------------------------------------------------------------------------
# Sections and files
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_section():
    """
    Returns a helper building a valid SectionOptions with overrides.

    Standard sections default to dyndns.org with credentials and one
    hostname; custom sections default to an update server and one hostname.
    """
    def _make(kind="provider", **overrides):
        if kind == "custom":
            values = {
                "title": "myddns",
                "ddns_server": "ddns.example.com",
                "hostname": ["home.example.com"],
            }
        else:
            values = {
                "title": "dyndns.org",
                "username": "u",
                "password": "p",
                "hostname": ["h.dyndns.org"],
            }
        values.update(overrides)
        return SectionOptions(kind=kind, **values)

    return _make


@pytest.fixture()
def write_config(tmp_path):
    """
    Returns a helper that writes dedented YAML to a file and returns its path.
    """
    def _write(text, name="ddns.yaml"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(text), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture()
def restore_logging():
    """Restores the root logger's handlers and level after the test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
