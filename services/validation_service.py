"""
services/validation_service.py

Responsibility: Runs the validation pass over a parsed configuration tree:
clamps the update period, migrates the deprecated 'alias' option and checks
every provider and custom section, returning one Diagnostic per failed
section.
Does NOT: read files, build provider records, or construct HTTP clients.
"""

from __future__ import annotations

import logging

from ddns.conf_parser import ParsedConfig, SectionOptions
from ddns.models import MAX_PERIOD, MIN_PERIOD, NAME_CAPACITY, Diagnostic
from ddns.plugins import CUSTOM_PLUGIN_NAME, PluginRegistry
from exceptions import (
    AliasConflictError,
    HostnameTooLongError,
    MissingCredentialError,
    MissingHostnamesError,
    MissingServerError,
    SectionError,
    UnknownProviderError,
)

logger = logging.getLogger(__name__)


def clamp_period(period: int) -> int:
    """
    Clamps an update period into [MIN_PERIOD, MAX_PERIOD].

    Out-of-range values are corrected, never rejected.

    Args:
        period: The configured period in seconds.

    Returns:
        The clamped period.
    """
    return max(MIN_PERIOD, min(MAX_PERIOD, period))


def migrate_alias(section: SectionOptions) -> None:
    """
    Moves the deprecated 'alias' list into 'hostname'.

    Entries are copied in order and the alias storage is dropped. Does
    nothing when 'alias' is absent or empty.

    Args:
        section: The section to migrate, modified in place.

    Returns:
        None

    Raises:
        AliasConflictError: If both 'alias' and 'hostname' have entries.
    """
    if not section.alias:
        return

    if section.hostname:
        raise AliasConflictError(
            section.label,
            "alias",
            "Both 'hostname' and 'alias' set, cannot convert deprecated 'alias' to 'hostname'",
        )

    logger.warning("%s: converting deprecated 'alias' to 'hostname'.", section.label)
    section.hostname = list(section.alias)
    section.alias = None


def validate_hostnames(section: SectionOptions) -> None:
    """
    Checks that a section lists at least one hostname, none too long.

    Raises:
        MissingHostnamesError: If 'hostname' is absent or empty.
        HostnameTooLongError: If an entry exceeds NAME_CAPACITY.
    """
    if section.hostname is None:
        raise MissingHostnamesError(
            section.label, "hostname", "DDNS hostname setting is missing"
        )
    if not section.hostname:
        raise MissingHostnamesError(section.label, "hostname", "No hostnames listed")

    for name in section.hostname:
        if len(name) > NAME_CAPACITY:
            raise HostnameTooLongError(
                section.label, "hostname", f"Too long DDNS hostname ({name})"
            )


def to_diagnostic(exc: SectionError) -> Diagnostic:
    return Diagnostic(section=exc.section, field=exc.field, message=exc.message, error=exc)


class ValidationService:
    """
    Validates every section of a parsed configuration.

    Each section is checked in a fixed order and stops at its first failure;
    a failure never stops sibling sections from being checked.

    Collaborators:
        - PluginRegistry: answers whether a provider name has a plugin
    """

    def __init__(self, plugins: PluginRegistry) -> None:
        """
        Initialises the service with the plugin registry.

        Args:
            plugins: Registry used for the plugin-existence check.
        """
        self._plugins = plugins

    # ---------------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------------

    def validate(self, config: ParsedConfig) -> list[Diagnostic]:
        """
        Validates the whole tree, correcting what may be corrected.

        The period is clamped and 'alias' lists are migrated in place.

        Args:
            config: The tree produced by the configuration parser.

        Returns:
            One Diagnostic per failed section, in declaration order. An
            empty list means every section is valid.
        """
        _, diagnostics = self.partition(config)
        return diagnostics

    def partition(self, config: ParsedConfig) -> tuple[list[SectionOptions], list[Diagnostic]]:
        """
        Validates the whole tree and splits its sections by outcome.

        Args:
            config: The tree produced by the configuration parser.

        Returns:
            The sections that passed, in declaration order, and one
            Diagnostic per section that did not.
        """
        clamped = clamp_period(config.period)
        if clamped != config.period:
            logger.debug("Clamped period %d to %d seconds.", config.period, clamped)
            config.period = clamped

        valid: list[SectionOptions] = []
        diagnostics: list[Diagnostic] = []
        for section in config.sections:
            try:
                self.validate_section(section)
            except SectionError as exc:
                logger.error("%s", exc)
                diagnostics.append(to_diagnostic(exc))
            else:
                valid.append(section)
        return valid, diagnostics

    def validate_section(self, section: SectionOptions) -> None:
        """
        Runs all checks for a single section.

        Args:
            section: A provider or custom section, modified in place by the
                     alias migration.

        Returns:
            None

        Raises:
            SectionError: The first check that fails.
        """
        if section.is_custom:
            self._validate_custom(section)
        elif not section.title:
            raise UnknownProviderError(section.label, None, "Missing DDNS provider name")

        migrate_alias(section)
        self._validate_common(section)
        validate_hostnames(section)

    # ---------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------

    def _validate_common(self, section: SectionOptions) -> None:
        # Custom providers may use anonymous update endpoints
        if not section.is_custom:
            if section.username is None:
                raise MissingCredentialError(
                    section.label, "username", "Missing username setting"
                )
            if section.password is None:
                raise MissingCredentialError(
                    section.label, "password", "Missing password setting"
                )

        name = CUSTOM_PLUGIN_NAME if section.is_custom else section.title
        if self._plugins.find(name) is None:
            raise UnknownProviderError(section.label, None, f"Invalid DDNS provider {name}")

    @staticmethod
    def _validate_custom(section: SectionOptions) -> None:
        if not section.ddns_server:
            raise MissingServerError(
                section.label, "ddns-server", "Missing 'ddns-server' for custom DDNS provider"
            )
