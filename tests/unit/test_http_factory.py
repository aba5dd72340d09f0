"""
tests/unit/test_http_factory.py

Unit tests for ddns/http_factory.py.
Clients are only constructed and closed; no request is sent.
"""

from __future__ import annotations

import httpx

from ddns.http_factory import base_url, create_http_client
from ddns.models import EndpointAddress


def test_base_url_plain_http():
    """Without SSL the base URL uses http and the given port."""
    assert base_url(EndpointAddress("members.dyndns.org", 80), ssl=False) == "http://members.dyndns.org:80"


def test_base_url_ssl_moves_default_port_to_443():
    """With SSL the default HTTP port becomes 443."""
    assert base_url(EndpointAddress("members.dyndns.org", 80), ssl=True) == "https://members.dyndns.org:443"


def test_base_url_ssl_keeps_explicit_port():
    """With SSL a non-default port is kept."""
    assert base_url(EndpointAddress("ddns.example.com", 8443), ssl=True) == "https://ddns.example.com:8443"


def test_create_http_client_binds_base_url():
    """create_http_client returns an httpx.Client bound to the endpoint."""
    client = create_http_client(EndpointAddress("ddns.example.com", 8080), ssl=False)
    try:
        assert isinstance(client, httpx.Client)
        assert client.base_url.scheme == "http"
        assert client.base_url.host == "ddns.example.com"
        assert client.base_url.port == 8080
    finally:
        client.close()


def test_create_http_client_ssl_scheme():
    """An SSL client is bound to an https base URL."""
    client = create_http_client(EndpointAddress("members.dyndns.org", 80), ssl=True)
    try:
        assert client.base_url.scheme == "https"
        assert client.base_url.host == "members.dyndns.org"
    finally:
        client.close()
