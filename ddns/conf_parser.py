"""
ddns/conf_parser.py

Responsibility: Reads the YAML configuration file and turns it into a typed
option tree (ParsedConfig / SectionOptions), applying schema defaults.
Does NOT: validate cross-field rules, look up plugins, or build provider
records. Those are ValidationService's and ProviderBuilder's jobs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import yaml

from ddns.models import (
    DEFAULT_CACHE_DIR,
    DEFAULT_FORCED_UPDATE_PERIOD,
    DEFAULT_ITERATIONS,
    DEFAULT_PERIOD,
)
from exceptions import ConfigFileError, ConfigSyntaxError

logger = logging.getLogger(__name__)

PROVIDER = "provider"
CUSTOM = "custom"

# ---------------------------------------------------------------------------
# Option schema
# ---------------------------------------------------------------------------

_GLOBAL_OPTIONS = {
    "period": int,
    "forced-update": int,
    "iterations": int,
    "fake-address": bool,
    "cache-dir": str,
    "iface": str,
}

_PROVIDER_OPTIONS = {
    "username": str,
    "password": str,
    "hostname": list,
    "alias": list,
    "ssl": bool,
    "wildcard": bool,
}

_CUSTOM_OPTIONS = {
    **_PROVIDER_OPTIONS,
    "append-myip": bool,
    "ddns-server": str,
    "ddns-path": str,
    "ddns-response": list,
    "checkip-server": str,
    "checkip-path": str,
}


# ---------------------------------------------------------------------------
# Option tree
# ---------------------------------------------------------------------------


@dataclass
class SectionOptions:
    """
    Options of one titled 'provider' or 'custom' section.

    List options are None when absent from the file, so validators can
    tell "not given" from "given but empty".
    """

    kind: str
    title: Optional[str]

    username: Optional[str] = None
    password: Optional[str] = None
    hostname: Optional[list[str]] = None

    # Deprecated spelling of 'hostname'; migrated during validation
    alias: Optional[list[str]] = None

    ssl: bool = False
    wildcard: bool = False

    # custom sections only
    append_myip: bool = False
    ddns_server: Optional[str] = None
    ddns_path: Optional[str] = None
    ddns_response: Optional[list[str]] = None
    checkip_server: Optional[str] = None
    checkip_path: Optional[str] = None

    @property
    def is_custom(self) -> bool:
        return self.kind == CUSTOM

    @property
    def label(self) -> str:
        """Name used in log lines and diagnostics."""
        if self.title:
            return f"{self.kind} {self.title}"
        return self.kind


@dataclass
class ParsedConfig:
    """The whole configuration file, with defaults applied."""

    period: int = DEFAULT_PERIOD
    forced_update: int = DEFAULT_FORCED_UPDATE_PERIOD
    iterations: int = DEFAULT_ITERATIONS
    fake_address: bool = False
    cache_dir: str = DEFAULT_CACHE_DIR
    iface: Optional[str] = None

    providers: list[SectionOptions] = field(default_factory=list)
    customs: list[SectionOptions] = field(default_factory=list)

    @property
    def sections(self) -> list[SectionOptions]:
        return [*self.providers, *self.customs]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_file(path: str) -> ParsedConfig:
    """
    Reads and parses a configuration file.

    Args:
        path: Filesystem path of the YAML configuration file.

    Returns:
        The typed option tree.

    Raises:
        ConfigFileError: If the file cannot be read.
        ConfigSyntaxError: If the file is not valid YAML, is not valid
                           UTF-8 or UTF-16, or an option has the wrong type.
    """
    try:
        # The YAML reader detects the encoding of raw bytes
        with open(path, "rb") as f:
            data = f.read()
    except OSError as exc:
        raise ConfigFileError(f"Cannot read configuration file {path}: {exc}") from exc

    return parse_text(data, source=path)


def parse_text(text: str | bytes, source: str = "<string>") -> ParsedConfig:
    """
    Parses configuration text.

    Args:
        text: YAML document, as text or as encoded bytes.
        source: Name used in error messages.

    Returns:
        The typed option tree.

    Raises:
        ConfigSyntaxError: If the text is not valid YAML (including bytes
                           that are not valid UTF-8 or UTF-16) or an
                           option has the wrong type.
    """
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigSyntaxError(f"Error parsing configuration file {source}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigSyntaxError(f"{source}: top level must be a mapping of options")

    values = _coerce_options(raw, _GLOBAL_OPTIONS, context=source, skip=(PROVIDER, CUSTOM))
    config = ParsedConfig()
    if "period" in values:
        config.period = values["period"]
    if "forced-update" in values:
        config.forced_update = values["forced-update"]
    if "iterations" in values:
        config.iterations = values["iterations"]
    if "fake-address" in values:
        config.fake_address = values["fake-address"]
    if "cache-dir" in values:
        config.cache_dir = values["cache-dir"]
    config.iface = values.get("iface")

    config.providers = _parse_sections(raw.get(PROVIDER), PROVIDER, _PROVIDER_OPTIONS, source)
    config.customs = _parse_sections(raw.get(CUSTOM), CUSTOM, _CUSTOM_OPTIONS, source)
    return config


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _parse_sections(
    raw: Any,
    kind: str,
    schema: dict[str, type],
    source: str,
) -> list[SectionOptions]:
    """
    Parses one repeatable section group, preserving declaration order.

    The group is either a mapping of title -> options, or a list of option
    mappings carrying the title under 'name'.
    """
    if raw is None:
        return []

    if isinstance(raw, dict):
        entries = [(title, opts) for title, opts in raw.items()]
    elif isinstance(raw, list):
        entries = []
        for item in raw:
            if not isinstance(item, dict):
                raise ConfigSyntaxError(f"{source}: each '{kind}' entry must be a mapping")
            opts = dict(item)
            entries.append((opts.pop("name", None), opts))
    else:
        raise ConfigSyntaxError(f"{source}: '{kind}' must be a mapping or a list of sections")

    sections = []
    for title, opts in entries:
        if opts is None:
            opts = {}
        if not isinstance(opts, dict):
            raise ConfigSyntaxError(f"{source}: {kind} {title}: options must be a mapping")
        title = None if title is None else str(title)
        values = _coerce_options(opts, schema, context=f"{source}: {kind} {title}")
        sections.append(_to_section(kind, title, values))
    return sections


def _to_section(kind: str, title: Optional[str], values: dict[str, Any]) -> SectionOptions:
    return SectionOptions(
        kind=kind,
        title=title,
        username=values.get("username"),
        password=values.get("password"),
        hostname=values.get("hostname"),
        alias=values.get("alias"),
        ssl=values.get("ssl", False),
        wildcard=values.get("wildcard", False),
        append_myip=values.get("append-myip", False),
        ddns_server=values.get("ddns-server"),
        ddns_path=values.get("ddns-path"),
        ddns_response=values.get("ddns-response"),
        checkip_server=values.get("checkip-server"),
        checkip_path=values.get("checkip-path"),
    )


def _coerce_options(
    raw: dict[Any, Any],
    schema: dict[str, type],
    context: str,
    skip: tuple[str, ...] = (),
) -> dict[str, Any]:
    """
    Type-checks every known option of a mapping; unknown options are ignored.

    Raises:
        ConfigSyntaxError: If a known option has a value of the wrong type.
    """
    values: dict[str, Any] = {}
    for key, value in raw.items():
        if key in skip:
            continue
        kind = schema.get(key)
        if kind is None:
            logger.debug("%s: ignoring unknown option '%s'", context, key)
            continue
        if value is None:
            continue
        values[key] = _coerce(value, kind, f"{context}: {key}")
    return values


def _coerce(value: Any, kind: type, context: str) -> Any:
    if kind is bool:
        if not isinstance(value, bool):
            raise ConfigSyntaxError(f"{context}: expected true/false, got {value!r}")
        return value

    if kind is int:
        # bool is an int subclass; 'period: yes' is still a type error
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigSyntaxError(f"{context}: expected an integer, got {value!r}")
        return value

    if kind is str:
        return _scalar_to_str(value, context)

    # list of strings; a single scalar is a one-element list
    if isinstance(value, list):
        return [_scalar_to_str(item, context) for item in value]
    return [_scalar_to_str(value, context)]


def _scalar_to_str(value: Any, context: str) -> str:
    # YAML reads 'password: 1234' as an int
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ConfigSyntaxError(f"{context}: expected a string, got {value!r}")
