"""
ddns/plugins.py

Responsibility: Holds the static ProviderPlugin descriptors and looks them
up by provider name.
Does NOT: build provider records, validate configuration, or talk to any
DDNS service.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from ddns.models import GENERIC_RESPONSES, ProviderPlugin

logger = logging.getLogger(__name__)

# Section kind used for fully user-specified providers
CUSTOM_PLUGIN_NAME = "custom"

_DEFAULT_PREFIX = "default@"

# ---------------------------------------------------------------------------
# Built-in descriptors
# ---------------------------------------------------------------------------

_BUILTIN_PLUGINS: tuple[ProviderPlugin, ...] = (
    ProviderPlugin(
        name="default@dyndns.org",
        checkip_name="checkip.dyndns.org",
        checkip_url="/",
        server_name="members.dyndns.org",
        server_url="/nic/update",
        responses=("good", "nochg"),
    ),
    ProviderPlugin(
        name="default@freedns.afraid.org",
        checkip_name="checkip.dyndns.org",
        checkip_url="/",
        server_name="freedns.afraid.org",
        server_url="/dynamic/update.php",
        responses=("Updated", "has not changed"),
    ),
    ProviderPlugin(
        name="default@no-ip.com",
        checkip_name="ip1.dynupdate.no-ip.com",
        checkip_url="/",
        server_name="dynupdate.no-ip.com",
        server_url="/nic/update",
        responses=("good", "nochg"),
    ),
    ProviderPlugin(
        name="default@duckdns.org",
        checkip_name="checkip.dyndns.org",
        checkip_url="/",
        server_name="www.duckdns.org",
        server_url="/update",
        responses=("OK",),
    ),
    # Server and path are always overridden by the custom section
    ProviderPlugin(
        name=CUSTOM_PLUGIN_NAME,
        checkip_name="checkip.dyndns.org",
        checkip_url="/",
        server_name="",
        server_url="/",
        responses=GENERIC_RESPONSES,
    ),
)


class PluginRegistry:
    """
    Maps provider names to their static ProviderPlugin descriptors.

    Lookup accepts either the full plugin name ("default@dyndns.org") or
    the bare service name ("dyndns.org").
    """

    def __init__(self, plugins: Iterable[ProviderPlugin] = ()) -> None:
        self._plugins: dict[str, ProviderPlugin] = {}
        for plugin in plugins:
            self.register(plugin)

    @classmethod
    def default(cls) -> "PluginRegistry":
        """Returns a registry preloaded with the built-in plugins."""
        return cls(_BUILTIN_PLUGINS)

    def register(self, plugin: ProviderPlugin) -> None:
        """
        Adds a plugin, replacing any existing one with the same name.

        Args:
            plugin: The descriptor to register.

        Returns:
            None
        """
        if plugin.name in self._plugins:
            logger.warning("Replacing DDNS plugin %s", plugin.name)
        self._plugins[plugin.name] = plugin
        logger.debug("Registered DDNS plugin %s", plugin.name)

    def find(self, name: str | None) -> ProviderPlugin | None:
        """
        Looks up a plugin by provider name.

        Args:
            name: A full plugin name, or a service name without the
                  "default@" prefix.

        Returns:
            The matching ProviderPlugin, or None if there is none.
        """
        if not name:
            return None
        plugin = self._plugins.get(name)
        if plugin is None and not name.startswith(_DEFAULT_PREFIX):
            plugin = self._plugins.get(_DEFAULT_PREFIX + name)
        return plugin

    def names(self) -> list[str]:
        return sorted(self._plugins)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find(name) is not None

    def __iter__(self) -> Iterator[ProviderPlugin]:
        return iter(self._plugins.values())

    def __len__(self) -> int:
        return len(self._plugins)
