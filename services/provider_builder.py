"""
services/provider_builder.py

Responsibility: Merges one validated configuration section with its plugin's
static defaults into a complete ProviderRecord.
Does NOT: validate cross-field rules (ValidationService does), store records
(ProviderRegistry does), or send any HTTP request.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from ddns.conf_parser import SectionOptions
from ddns.endpoint import resolve
from ddns.models import (
    GENERIC_RESPONSES,
    PASSWORD_CAPACITY,
    URL_CAPACITY,
    USERNAME_CAPACITY,
    Admission,
    Credentials,
    EndpointAddress,
    HostnameSet,
    ProviderPlugin,
    ProviderRecord,
    ResponseList,
    fits,
)
from ddns.http_factory import create_http_client
from ddns.plugins import CUSTOM_PLUGIN_NAME, PluginRegistry
from exceptions import (
    ConfigOverflowError,
    EndpointTooLongError,
    MissingServerError,
    PluginLookupError,
)

logger = logging.getLogger(__name__)

ClientFactory = Callable[[EndpointAddress, bool], Any]


class ProviderBuilder:
    """
    Builds ProviderRecords from validated sections.

    Standard sections take every endpoint from their plugin; custom
    sections may override the checkip and update endpoints, their paths and
    the expected responses.

    Collaborators:
        - PluginRegistry: supplies the static defaults for each provider
        - client_factory: constructs the two opaque HTTP handles per record
    """

    def __init__(
        self,
        plugins: PluginRegistry,
        client_factory: ClientFactory = create_http_client,
    ) -> None:
        """
        Initialises the builder.

        Args:
            plugins: Registry the section's plugin is looked up in.
            client_factory: Called as client_factory(endpoint, ssl) for the
                            checkip and update handles.
        """
        self._plugins = plugins
        self._client_factory = client_factory

    # ---------------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------------

    def build(self, section: SectionOptions) -> ProviderRecord:
        """
        Builds the record for one section.

        Args:
            section: A section that passed ValidationService.

        Returns:
            The completed ProviderRecord, HTTP handles included.

        Raises:
            PluginLookupError: If the section's plugin cannot be found.
            ConfigOverflowError: If a default or override does not fit.
            MissingServerError: If a custom update server resolves to an
                                empty name.
        """
        name = CUSTOM_PLUGIN_NAME if section.is_custom else section.title
        plugin = self._plugins.find(name)
        if plugin is None:
            raise PluginLookupError(
                section.label, None, f"Cannot find a DDNS plugin for provider '{name}'"
            )

        record = self._seed_from_plugin(section, plugin)
        record.wildcard = section.wildcard
        record.ssl_enabled = section.ssl
        record.creds = self._credentials(section)
        self._add_hostnames(record, section.hostname or [])

        if section.is_custom:
            self._apply_custom(record, section)

        record.checkip_client = self._client_factory(record.checkip, record.ssl_enabled)
        record.update_client = self._client_factory(record.server, record.ssl_enabled)

        logger.debug(
            "Built %s: update %s%s, checkip %s%s, hostnames %s",
            section.label,
            record.server,
            record.server_url,
            record.checkip,
            record.checkip_url,
            list(record.hostnames),
        )
        return record

    # ---------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------

    def _seed_from_plugin(self, section: SectionOptions, plugin: ProviderPlugin) -> ProviderRecord:
        checkip = self._endpoint(section, "checkip-server", plugin.checkip_name)
        server = self._endpoint(section, "ddns-server", plugin.server_name)

        for option, url in (("checkip-path", plugin.checkip_url), ("ddns-path", plugin.server_url)):
            if not fits(url, URL_CAPACITY):
                raise ConfigOverflowError(
                    section.label, option, f"Plugin {plugin.name} default path is too long"
                )

        return ProviderRecord(
            title=section.title or CUSTOM_PLUGIN_NAME,
            plugin=plugin,
            is_custom=section.is_custom,
            checkip=checkip,
            checkip_url=plugin.checkip_url,
            server=server,
            server_url=plugin.server_url,
        )

    @staticmethod
    def _endpoint(section: SectionOptions, option: str, raw: str) -> EndpointAddress:
        try:
            return resolve(raw)
        except EndpointTooLongError as exc:
            raise ConfigOverflowError(section.label, option, str(exc)) from exc

    @staticmethod
    def _credentials(section: SectionOptions) -> Credentials:
        creds = Credentials()
        # Oversized credentials are dropped, not rejected
        if fits(section.username, USERNAME_CAPACITY):
            creds.username = section.username
        elif section.username is not None:
            logger.debug("%s: username too long, ignoring it.", section.label)
        if fits(section.password, PASSWORD_CAPACITY):
            creds.password = section.password
        elif section.password is not None:
            logger.debug("%s: password too long, ignoring it.", section.label)
        return creds

    @staticmethod
    def _add_hostnames(record: ProviderRecord, names: list[str]) -> None:
        hostnames = HostnameSet()
        dropped = [name for name in names if hostnames.add(name) is Admission.REJECTED]
        if dropped:
            logger.warning(
                "%s: only %d hostnames supported, skipping %s",
                record.title,
                hostnames.capacity,
                ", ".join(dropped),
            )
        record.hostnames = hostnames

    def _apply_custom(self, record: ProviderRecord, section: SectionOptions) -> None:
        record.append_myip = section.append_myip

        if section.checkip_server:
            record.checkip = self._endpoint(section, "checkip-server", section.checkip_server)
            if not record.checkip.name:
                raise MissingServerError(
                    section.label, "checkip-server", "Empty 'checkip-server' host name"
                )
        if fits(section.checkip_path, URL_CAPACITY):
            record.checkip_url = section.checkip_path

        if section.ddns_server:
            record.server = self._endpoint(section, "ddns-server", section.ddns_server)
        if not record.server.name:
            raise MissingServerError(section.label, "ddns-server", "Empty 'ddns-server' host name")
        if fits(section.ddns_path, URL_CAPACITY):
            record.server_url = section.ddns_path

        record.responses = self._responses(record, section.ddns_response or [])

    @staticmethod
    def _responses(record: ProviderRecord, configured: list[str]) -> ResponseList:
        responses = ResponseList()

        if not configured:
            for response in record.plugin.responses or GENERIC_RESPONSES:
                if responses.add(response) is Admission.REJECTED:
                    break
            return responses

        warned = False
        for response in configured:
            admission = responses.add(response)
            if admission is Admission.TRUNCATED:
                logger.warning("%s: response '%s' too long, truncated.", record.title, response)
            elif admission is Admission.REJECTED and not warned:
                logger.warning(
                    "%s: skipping response '%s', only %d custom responses supported",
                    record.title,
                    response,
                    responses.capacity,
                )
                warned = True
        return responses
