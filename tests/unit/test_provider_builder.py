"""
tests/unit/test_provider_builder.py

Unit tests for services/provider_builder.py.
HTTP handles come from the MagicMock client_factory fixture in conftest.py.
"""

from __future__ import annotations

import logging

import pytest

from ddns.models import (
    GENERIC_RESPONSES,
    HTTP_DEFAULT_PORT,
    MAX_HOSTNAMES,
    MAX_RESPONSES,
    NAME_CAPACITY,
    RESPONSE_CAPACITY,
    URL_CAPACITY,
    USERNAME_CAPACITY,
    EndpointAddress,
    ProviderPlugin,
)
from ddns.plugins import PluginRegistry
from exceptions import ConfigOverflowError, MissingServerError, PluginLookupError
from services.provider_builder import ProviderBuilder


# ---------------------------------------------------------------------------
# Standard providers
# ---------------------------------------------------------------------------


def test_build_standard_provider_from_plugin_defaults(builder, make_section):
    """A provider section takes its endpoints and paths from the plugin."""
    record = builder.build(make_section(wildcard=True))

    assert record.title == "dyndns.org"
    assert record.plugin.name == "default@dyndns.org"
    assert record.is_custom is False
    assert record.server == EndpointAddress("members.dyndns.org", HTTP_DEFAULT_PORT)
    assert record.server_url == "/nic/update"
    assert record.checkip == EndpointAddress("checkip.dyndns.org", HTTP_DEFAULT_PORT)
    assert record.checkip_url == "/"
    assert record.wildcard is True
    assert record.creds.username == "u"
    assert record.creds.password == "p"
    assert record.hostnames == ["h.dyndns.org"]


def test_standard_provider_keeps_plugin_responses(builder, make_section):
    """A provider section stores no responses and falls back to the plugin's list."""
    record = builder.build(make_section())
    assert len(record.responses) == 0
    assert record.expected_responses == ("good", "nochg")


def test_standard_provider_ignores_custom_options(builder, make_section):
    """Server overrides only apply to custom sections."""
    record = builder.build(make_section(ddns_server="evil.example.com", append_myip=True))
    assert record.server.name == "members.dyndns.org"
    assert record.append_myip is False


def test_build_constructs_both_http_handles(builder, client_factory, make_section):
    """build creates one checkip handle and one update handle through the factory."""
    record = builder.build(make_section(ssl=True))

    assert client_factory.call_count == 2
    assert record.checkip_client.endpoint == record.checkip
    assert record.update_client.endpoint == record.server
    assert record.update_client.ssl is True


def test_oversized_credentials_are_dropped(builder, make_section):
    """A username over its capacity is dropped and the password is kept."""
    record = builder.build(make_section(username="u" * (USERNAME_CAPACITY + 1)))
    assert record.creds.username == ""
    assert record.creds.password == "p"


def test_hostnames_beyond_capacity_are_dropped_with_one_warning(builder, make_section, caplog):
    """Hostnames past MAX_HOSTNAMES are dropped and a single warning names them."""
    names = [f"h{i}.dyndns.org" for i in range(MAX_HOSTNAMES + 3)]
    caplog.set_level(logging.WARNING)

    record = builder.build(make_section(hostname=names))

    assert list(record.hostnames) == names[:MAX_HOSTNAMES]
    warnings = [r for r in caplog.records if "hostnames supported" in r.getMessage()]
    assert len(warnings) == 1


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


def test_missing_plugin_raises_lookup_error(client_factory, make_section):
    """An unknown plugin raises PluginLookupError before any handle is built."""
    builder = ProviderBuilder(PluginRegistry(), client_factory)
    with pytest.raises(PluginLookupError):
        builder.build(make_section())
    client_factory.assert_not_called()


def test_oversized_plugin_server_raises_overflow(client_factory, make_section):
    """A plugin server name over NAME_CAPACITY raises ConfigOverflowError."""
    plugins = PluginRegistry([
        ProviderPlugin("default@long.example", "checkip.example", "/", "s" * (NAME_CAPACITY + 1), "/"),
    ])
    builder = ProviderBuilder(plugins, client_factory)
    with pytest.raises(ConfigOverflowError):
        builder.build(make_section(title="long.example"))


def test_oversized_plugin_path_raises_overflow(client_factory, make_section):
    """A plugin default path over URL_CAPACITY raises ConfigOverflowError."""
    plugins = PluginRegistry([
        ProviderPlugin("default@long.example", "checkip.example", "/", "s.example", "/" * (URL_CAPACITY + 1)),
    ])
    builder = ProviderBuilder(plugins, client_factory)
    with pytest.raises(ConfigOverflowError):
        builder.build(make_section(title="long.example"))


def test_oversized_custom_server_raises_overflow(builder, make_section):
    """A custom ddns-server over NAME_CAPACITY raises ConfigOverflowError."""
    with pytest.raises(ConfigOverflowError):
        builder.build(make_section("custom", ddns_server="d" * (NAME_CAPACITY + 1)))


def test_custom_server_without_host_raises(builder, make_section):
    """A custom ddns-server with only a port raises MissingServerError."""
    with pytest.raises(MissingServerError):
        builder.build(make_section("custom", ddns_server=":8080"))


def test_custom_checkip_server_without_host_raises(builder, client_factory, make_section):
    """A custom checkip-server with only a port raises MissingServerError."""
    with pytest.raises(MissingServerError) as excinfo:
        builder.build(make_section("custom", checkip_server=":8080"))
    assert excinfo.value.field == "checkip-server"
    client_factory.assert_not_called()


# ---------------------------------------------------------------------------
# Custom providers
# ---------------------------------------------------------------------------


def test_custom_overrides_endpoints_and_paths(builder, make_section):
    """Custom options replace the endpoints, paths and append_myip."""
    section = make_section(
        "custom",
        ddns_server="ddns.example.com:8080",
        ddns_path="/update?hostname=",
        checkip_server="checkip.example.com",
        checkip_path="/ip",
        append_myip=True,
    )
    record = builder.build(section)

    assert record.is_custom is True
    assert record.plugin.name == "custom"
    assert record.title == "myddns"
    assert record.server == EndpointAddress("ddns.example.com", 8080)
    assert record.server_url == "/update?hostname="
    assert record.checkip == EndpointAddress("checkip.example.com", HTTP_DEFAULT_PORT)
    assert record.checkip_url == "/ip"
    assert record.append_myip is True
    assert record.update_client.endpoint == EndpointAddress("ddns.example.com", 8080)


def test_custom_oversized_path_keeps_default(builder, make_section):
    """A custom path over URL_CAPACITY is ignored and the default path is kept."""
    record = builder.build(make_section("custom", ddns_path="/" * (URL_CAPACITY + 1)))
    assert record.server_url == "/"


def test_custom_without_responses_gets_generic_defaults(builder, make_section):
    """A custom section with no ddns-response gets the generic responses."""
    record = builder.build(make_section("custom"))
    assert list(record.responses) == list(GENERIC_RESPONSES)[:MAX_RESPONSES]


def test_custom_responses_are_kept_in_order(builder, make_section):
    """Configured responses are stored in the order given."""
    record = builder.build(make_section("custom", ddns_response=["updated", "OK"]))
    assert list(record.responses) == ["updated", "OK"]


def test_custom_responses_beyond_capacity_warn_once(builder, make_section, caplog):
    """Responses past MAX_RESPONSES are dropped with a single warning."""
    responses = [f"resp{i}" for i in range(MAX_RESPONSES + 3)]
    caplog.set_level(logging.WARNING)

    record = builder.build(make_section("custom", ddns_response=responses))

    assert list(record.responses) == responses[:MAX_RESPONSES]
    warnings = [r for r in caplog.records if "custom responses supported" in r.getMessage()]
    assert len(warnings) == 1


def test_custom_long_response_is_truncated(builder, make_section):
    """A response over RESPONSE_CAPACITY is truncated."""
    record = builder.build(make_section("custom", ddns_response=["x" * (RESPONSE_CAPACITY + 5)]))
    assert list(record.responses) == ["x" * RESPONSE_CAPACITY]
