"""
exceptions.py

Responsibility: Defines all custom exception classes used across the application.
Does NOT: contain business logic, logging, or file parsing.
"""

from __future__ import annotations


class ConfigError(Exception):
    """
    Base class for every configuration loading failure.
    """


# ---------------------------------------------------------------------------
# Load-fatal: nothing is built when one of these is raised
# ---------------------------------------------------------------------------


class ConfigFileError(ConfigError):
    """
    Raised by the configuration parser when the file cannot be read
    (missing, unreadable, or a directory).
    """


class ConfigSyntaxError(ConfigError):
    """
    Raised by the configuration parser when the file is not valid YAML, or
    when an option holds a value of the wrong type.
    """


class EndpointTooLongError(ConfigError):
    """
    Raised by the endpoint resolver when a server name exceeds NAME_CAPACITY.
    """


# ---------------------------------------------------------------------------
# Section-fatal: the section is skipped, sibling sections still load
# ---------------------------------------------------------------------------


class SectionError(ConfigError):
    """
    Raised when a single provider or custom section cannot be validated or
    built.

    Carries the section title and the offending option name so the loader
    can report a structured diagnostic. Callers (typically ConfigLoader)
    must catch this, log it and continue with the next section.
    """

    def __init__(self, section: str, field: str | None, message: str) -> None:
        super().__init__(message)
        self.section = section
        self.field = field
        self.message = message

    def __str__(self) -> str:
        if self.field:
            return f"[{self.section}] {self.field}: {self.message}"
        return f"[{self.section}] {self.message}"


class AliasConflictError(SectionError):
    """
    Raised when both the deprecated 'alias' list and 'hostname' are set.
    """


class MissingCredentialError(SectionError):
    """
    Raised when a standard provider section lacks a username or password.
    """


class UnknownProviderError(SectionError):
    """
    Raised when the section names no provider, or one with no plugin.
    """


class MissingHostnamesError(SectionError):
    """
    Raised when a section lists no hostnames to update.
    """


class HostnameTooLongError(SectionError):
    """
    Raised when a hostname exceeds NAME_CAPACITY.
    """


class MissingServerError(SectionError):
    """
    Raised when a custom section has no 'ddns-server', or when a server
    override has an empty host name.
    """


class PluginLookupError(SectionError):
    """
    Raised by ProviderBuilder when the plugin disappears between validation
    and build.
    """


class ConfigOverflowError(SectionError):
    """
    Raised by ProviderBuilder when a plugin default or an endpoint override
    does not fit its fixed capacity.
    """
