"""
services/config_loader.py

Responsibility: Orchestrates a configuration load: parse the file, run the
validation pass, extract the GlobalConfig and build one ProviderRecord per
valid section.
Does NOT: implement the file grammar, the validation rules, or the record
merging itself. Those are delegated to conf_parser, ValidationService and
ProviderBuilder.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ddns.conf_parser import ParsedConfig, parse_file
from ddns.http_factory import create_http_client
from ddns.models import ERROR_UPDATE_PERIOD, Diagnostic, GlobalConfig
from ddns.plugins import PluginRegistry
from exceptions import ConfigError, SectionError
from repositories.provider_registry import ProviderRegistry
from services.provider_builder import ClientFactory, ProviderBuilder
from services.validation_service import ValidationService, to_diagnostic

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """
    Outcome of one configuration load.

    registry holds the records of every section that loaded; diagnostics
    lists every section that did not.
    """

    global_config: GlobalConfig
    registry: ProviderRegistry
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


class ConfigLoader:
    """
    Loads a configuration file into a GlobalConfig and a ProviderRegistry.

    A failing section is logged and skipped; the remaining sections still
    load, and the failure is reported through LoadResult.diagnostics.

    Collaborators:
        - conf_parser: reads the file into a typed option tree
        - ValidationService: checks every section and clamps the period
        - ProviderBuilder / ProviderRegistry: build and own the records
    """

    def __init__(
        self,
        plugins: PluginRegistry | None = None,
        *,
        iface: Optional[str] = None,
        once: bool = False,
        client_factory: ClientFactory = create_http_client,
    ) -> None:
        """
        Initialises the loader.

        Args:
            plugins: Plugin registry; defaults to the built-in plugins.
            iface: Interface name from the command line; overrides 'iface'
                   in the file.
            once: Run-once mode from the command line; forces iterations to 1.
            client_factory: Passed to ProviderBuilder for the HTTP handles.
        """
        self._plugins = plugins if plugins is not None else PluginRegistry.default()
        self._iface = iface
        self._once = once
        self._validator = ValidationService(self._plugins)
        self._builder = ProviderBuilder(self._plugins, client_factory)

    # ---------------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------------

    def load(self, path: str) -> LoadResult:
        """
        Loads the configuration file at path.

        Args:
            path: Filesystem path of the YAML configuration file.

        Returns:
            A LoadResult; check .ok before handing the registry on.

        Raises:
            ConfigFileError: If the file cannot be read.
            ConfigSyntaxError: If the file cannot be parsed.
        """
        parsed = parse_file(path)
        sections, diagnostics = self._validator.partition(parsed)

        global_config = self._global_config(parsed)
        registry = ProviderRegistry(self._builder)

        for section in sections:
            try:
                registry.create(section)
            except SectionError as exc:
                logger.error("Failed setting up %s, skipping: %s", section.label, exc)
                diagnostics.append(to_diagnostic(exc))

        if diagnostics:
            logger.error(
                "%s: %d of %d DDNS provider sections failed to load.",
                path,
                len(diagnostics),
                len(parsed.sections),
            )
        else:
            logger.info("%s: loaded %d DDNS providers.", path, len(registry))

        return LoadResult(global_config=global_config, registry=registry, diagnostics=diagnostics)

    # ---------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------

    def _global_config(self, parsed: ParsedConfig) -> GlobalConfig:
        return GlobalConfig(
            period=parsed.period,
            forced_update_period=parsed.forced_update,
            error_update_period=ERROR_UPDATE_PERIOD,
            total_iterations=1 if self._once else parsed.iterations,
            cache_dir=parsed.cache_dir,
            fake_address=parsed.fake_address,
            iface=self._iface or parsed.iface,
        )


def load_config(
    path: str,
    plugins: PluginRegistry | None = None,
    *,
    iface: Optional[str] = None,
    once: bool = False,
) -> LoadResult | None:
    """
    Loads a configuration file, all or nothing.

    Args:
        path: Filesystem path of the YAML configuration file.
        plugins: Plugin registry; defaults to the built-in plugins.
        iface: Command-line interface name override.
        once: Command-line run-once flag.

    Returns:
        The LoadResult if the file and every section loaded, otherwise None.
        A partially built registry is released before returning None.
    """
    loader = ConfigLoader(plugins, iface=iface, once=once)
    try:
        result = loader.load(path)
    except ConfigError as exc:
        logger.error("%s", exc)
        return None

    if not result.ok:
        result.registry.destroy_all()
        return None
    return result
