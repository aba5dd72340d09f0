"""
ddns/endpoint.py

Responsibility: Parses "host[:port]" server strings into EndpointAddress
value objects, falling back to a default port.
Does NOT: resolve DNS names, open sockets, or read configuration.
"""

from __future__ import annotations

from ddns.models import HTTP_DEFAULT_PORT, NAME_CAPACITY, EndpointAddress
from exceptions import EndpointTooLongError

_MAX_PORT = 65535


def _parse_port(raw: str) -> int | None:
    """
    Converts a port string into an integer.

    Args:
        raw: The text after the first ':' of a server string.

    Returns:
        The port number, or None if raw is not a decimal number in 1..65535.
    """
    raw = raw.strip()
    if not raw.isdigit():
        return None
    port = int(raw)
    if port == 0 or port > _MAX_PORT:
        return None
    return port


def resolve(raw: str, default_port: int = HTTP_DEFAULT_PORT) -> EndpointAddress:
    """
    Splits a server string into name and port.

    "server:port" yields that port; "server" or "server:garbage" falls back
    to default_port. An invalid port is never an error.

    Args:
        raw: The server string from a plugin default or a config override.
        default_port: Port used when none (or an invalid one) is given.

    Returns:
        The resolved EndpointAddress.

    Raises:
        EndpointTooLongError: If raw is longer than NAME_CAPACITY.
    """
    if len(raw) > NAME_CAPACITY:
        raise EndpointTooLongError(
            f"Server name '{raw[:32]}...' exceeds {NAME_CAPACITY} characters."
        )

    name, sep, port_str = raw.partition(":")
    port = _parse_port(port_str) if sep else None
    if port is None:
        port = default_port

    return EndpointAddress(name=name, port=port)
