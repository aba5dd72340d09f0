"""
ddns/http_factory.py

Responsibility: Constructs the httpx.Client handles stored on each
ProviderRecord, one for the checkip endpoint and one for the update endpoint.
Does NOT: send requests, encode credentials, or parse responses. The update
engine owns all traffic.
"""

from __future__ import annotations

import httpx

from ddns.models import HTTP_DEFAULT_PORT, HTTPS_DEFAULT_PORT, EndpointAddress

# Timeout applied to every request made through a provider handle
_TIMEOUT_SECONDS = 30.0

_USER_AGENT = "ddns-conf/1.0"


def base_url(endpoint: EndpointAddress, ssl: bool) -> str:
    """
    Builds the base URL for an endpoint.

    An SSL endpoint left on the plain HTTP default port is moved to 443.

    Args:
        endpoint: The resolved server name and port.
        ssl: Whether the provider is configured to use HTTPS.

    Returns:
        A URL such as "https://members.dyndns.org:443".
    """
    scheme = "https" if ssl else "http"
    port = endpoint.port
    if ssl and port == HTTP_DEFAULT_PORT:
        port = HTTPS_DEFAULT_PORT
    return f"{scheme}://{endpoint.name}:{port}"


def create_http_client(endpoint: EndpointAddress, ssl: bool) -> httpx.Client:
    """
    Returns an idle httpx.Client bound to the endpoint.

    Constructing the client opens no connection.

    Args:
        endpoint: The resolved server name and port.
        ssl: Whether the provider is configured to use HTTPS.

    Returns:
        An httpx.Client; the caller must close() it.
    """
    return httpx.Client(
        base_url=base_url(endpoint, ssl),
        timeout=_TIMEOUT_SECONDS,
        headers={"User-Agent": _USER_AGENT},
    )
