"""
ddns/models.py

Responsibility: Defines the value objects shared by the configuration loader,
the provider builder and the provider registry, together with the fixed
capacities and defaults they are checked against.
Does NOT: parse files, look up plugins, or open network connections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional


# ---------------------------------------------------------------------------
# Periods (seconds)
# ---------------------------------------------------------------------------

MIN_PERIOD = 120
MAX_PERIOD = 10 * 24 * 3600
DEFAULT_PERIOD = 600
DEFAULT_FORCED_UPDATE_PERIOD = 30 * 24 * 3600

# Retry delay after a failed update; not user-configurable
ERROR_UPDATE_PERIOD = 600

# 0 means "run forever"
DEFAULT_ITERATIONS = 0

DEFAULT_CACHE_DIR = "/var/cache/ddns"

# ---------------------------------------------------------------------------
# Capacities
# ---------------------------------------------------------------------------

HTTP_DEFAULT_PORT = 80
HTTPS_DEFAULT_PORT = 443

NAME_CAPACITY = 255
URL_CAPACITY = 256
USERNAME_CAPACITY = 128
PASSWORD_CAPACITY = 128

MAX_HOSTNAMES = 10
MAX_RESPONSES = 5
RESPONSE_CAPACITY = 64

# Accepted as success by custom providers that configure no ddns-response
GENERIC_RESPONSES: tuple[str, ...] = ("OK", "good", "true", "updated")


# ---------------------------------------------------------------------------
# Admission: outcome of every bounded insertion
# ---------------------------------------------------------------------------


class Admission(Enum):
    """
    Result of offering a value to a fixed-capacity field or collection.

    ACCEPTED: stored as given.
    TRUNCATED: stored, but cut to the field capacity.
    REJECTED: not stored; earlier contents are untouched.
    """

    ACCEPTED = "accepted"
    TRUNCATED = "truncated"
    REJECTED = "rejected"


def fits(value: str | None, capacity: int) -> bool:
    """Returns True if value is set and no longer than capacity."""
    return value is not None and len(value) <= capacity


# ---------------------------------------------------------------------------
# GlobalConfig
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GlobalConfig:
    """
    Process-wide settings extracted once per configuration load.

    Consumed read-only by the update engine.
    """

    period: int = DEFAULT_PERIOD
    forced_update_period: int = DEFAULT_FORCED_UPDATE_PERIOD
    error_update_period: int = ERROR_UPDATE_PERIOD

    # 0 = run forever; forced to 1 in run-once mode
    total_iterations: int = DEFAULT_ITERATIONS

    cache_dir: str = DEFAULT_CACHE_DIR

    # Force an update with a synthetic address, for testing providers
    fake_address: bool = False

    # Network interface; a command-line value overrides the file
    iface: Optional[str] = None


# ---------------------------------------------------------------------------
# Endpoints and credentials
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EndpointAddress:
    """A resolved server name and TCP port."""

    name: str
    port: int = HTTP_DEFAULT_PORT

    def __str__(self) -> str:
        return f"{self.name}:{self.port}"


@dataclass
class Credentials:
    """
    Username and password for one provider.

    encoded_password is filled in later by the HTTP layer (e.g. the base64
    form used for basic auth) and is owned by the record.
    """

    username: str = ""
    password: str = ""
    encoded_password: Optional[bytes] = None

    def release(self) -> None:
        self.encoded_password = None

    def __repr__(self) -> str:
        # Never leak secrets into log lines
        return f"Credentials(username={self.username!r}, password=***)"


# ---------------------------------------------------------------------------
# Bounded collections
# ---------------------------------------------------------------------------


class HostnameSet:
    """
    Ordered sequence of hostnames, capped at MAX_HOSTNAMES entries of
    at most NAME_CAPACITY characters each. Duplicates are kept as given.
    """

    def __init__(self, capacity: int = MAX_HOSTNAMES) -> None:
        self._capacity = capacity
        self._names: list[str] = []

    def add(self, name: str) -> Admission:
        """
        Appends a hostname if there is room for it.

        Args:
            name: The fully-qualified hostname to update.

        Returns:
            ACCEPTED if stored, REJECTED if the set is full or the name is
            longer than NAME_CAPACITY.
        """
        if len(self._names) >= self._capacity or len(name) > NAME_CAPACITY:
            return Admission.REJECTED
        self._names.append(name)
        return Admission.ACCEPTED

    @property
    def capacity(self) -> int:
        return self._capacity

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HostnameSet):
            return self._names == other._names
        if isinstance(other, (list, tuple)):
            return self._names == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"HostnameSet({self._names!r})"


class ResponseList:
    """
    Ordered list of expected success-response substrings, capped at
    MAX_RESPONSES entries. Entries longer than RESPONSE_CAPACITY are cut.
    """

    def __init__(self, capacity: int = MAX_RESPONSES) -> None:
        self._capacity = capacity
        self._items: list[str] = []

    def add(self, response: str) -> Admission:
        if len(self._items) >= self._capacity:
            return Admission.REJECTED
        if len(response) > RESPONSE_CAPACITY:
            self._items.append(response[:RESPONSE_CAPACITY])
            return Admission.TRUNCATED
        self._items.append(response)
        return Admission.ACCEPTED

    @property
    def capacity(self) -> int:
        return self._capacity

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResponseList):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            return self._items == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"ResponseList({self._items!r})"


# ---------------------------------------------------------------------------
# Plugin descriptor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProviderPlugin:
    """
    Static description of a DDNS service: where to ask for the current
    public address, where to send updates, and which response substrings
    mean success.
    """

    name: str

    # "host[:port]" and URL path of the checkip service
    checkip_name: str
    checkip_url: str

    # "host[:port]" and URL path (or path prefix) of the update service
    server_name: str
    server_url: str

    responses: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# ProviderRecord: one per configured provider or custom section
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class ProviderRecord:
    """
    A fully merged provider definition ready for the update engine.

    Created once by ProviderBuilder and owned by ProviderRegistry. Nothing
    changes after creation except creds.encoded_password.

    Collaborators:
        - ProviderPlugin: the static defaults this record was seeded from
        - checkip_client / update_client: opaque HTTP handles, only built here
    """

    title: str
    plugin: ProviderPlugin
    is_custom: bool

    checkip: EndpointAddress
    checkip_url: str
    server: EndpointAddress
    server_url: str

    wildcard: bool = False
    ssl_enabled: bool = False
    append_myip: bool = False

    creds: Credentials = field(default_factory=Credentials)
    hostnames: HostnameSet = field(default_factory=HostnameSet)

    # Custom sections only; standard providers use the plugin's list
    responses: ResponseList = field(default_factory=ResponseList)

    checkip_client: Any = None
    update_client: Any = None

    @property
    def expected_responses(self) -> tuple[str, ...]:
        if len(self.responses):
            return tuple(self.responses)
        return self.plugin.responses

    def release(self) -> None:
        """
        Closes both HTTP handles and drops the encoded password.

        Returns:
            None
        """
        for client in (self.checkip_client, self.update_client):
            if client is not None:
                client.close()
        self.checkip_client = None
        self.update_client = None
        self.creds.release()


# ---------------------------------------------------------------------------
# Diagnostic: one per failed section
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Diagnostic:
    """
    Structured report of a section that failed validation or build.
    """

    section: str
    field: Optional[str]
    message: str

    # The SectionError that produced this diagnostic
    error: Exception

    def __str__(self) -> str:
        return str(self.error)
