"""Tests for server address normalization."""

import httpx
import pytest

from lnurl_client.exceptions import InvalidAddress
from lnurl_client.lnurl.address import is_url, join_url, normalize_address


@pytest.mark.parametrize("url", [
    "http://example.com",
    "https://example.com/",
    "http://example.com:8080/lnurl",
    "https://lnurl.example.com/api/v1?tag=withdraw",
    "http://192.168.1.10:3000",
    "http://[::1]:8080",
])
def test_url_is_returned_unchanged(url):
    """Well-formed URLs pass through untouched."""
    assert normalize_address(url) == url


@pytest.mark.parametrize("address,expected", [
    ("192.168.1.10:8080", "http://192.168.1.10:8080"),
    ("127.0.0.1:1", "http://127.0.0.1:1"),
    ("10.0.0.1:65535", "http://10.0.0.1:65535"),
    ("[::1]:8080", "http://[::1]:8080"),
    ("[2001:db8::1]:3000", "http://[2001:db8::1]:3000"),
])
def test_host_and_port(address, expected):
    """Bare host:port becomes an http URL."""
    assert normalize_address(address) == expected


@pytest.mark.parametrize("host,port", [
    ("192.168.1.10", 8080),
    ("10.0.0.1", 80),
    ("::1", 9000),
    ("2001:db8::42", 443),
    ("fe80::1", 3000),
])
def test_host_and_port_round_trip(host, port):
    """Host and port survive normalization exactly."""
    literal = f"[{host}]" if ":" in host else host
    url = httpx.URL(normalize_address(f"{literal}:{port}"))

    assert url.host == host
    assert url.port == port or (port == 80 and url.port is None)


def test_bare_ipv4():
    """A bare IPv4 address uses the scheme default port."""
    assert normalize_address("10.0.0.1") == "http://10.0.0.1"


def test_bare_ipv6():
    """A bare IPv6 address is bracketed."""
    assert normalize_address("::1") == "http://[::1]"


def test_unbracketed_ipv6_with_port():
    """A trailing :port after a full IPv6 literal is taken as the port."""
    assert normalize_address("2001:db8::1:8080") == "http://[2001:db8::1]:8080"


def test_surrounding_whitespace_ignored():
    """Whitespace around the address is stripped."""
    assert normalize_address("  10.0.0.1:80 ") == "http://10.0.0.1:80"


def test_lnurl_is_decoded(sample_lnurl):
    """A bech32 LNURL is decoded to its URL."""
    assert normalize_address(sample_lnurl).startswith("https://service.com/api?q=")


def test_lightning_prefixed_lnurl(sample_lnurl):
    """lightning: prefixed LNURLs are accepted."""
    url = normalize_address(f"lightning:{sample_lnurl.lower()}")
    assert url.startswith("https://service.com/")


@pytest.mark.parametrize("address", [
    "",
    "   ",
    "not an address",
    "localhost:8080",
    "example.com",
    "300.1.1.1",
    "192.168.1.1:99999",
    "192.168.1.1:port",
    "[::1]:abc",
    "[not-ip]:8080",
    "http://[::1",
])
def test_invalid_addresses(address):
    """Anything else is rejected."""
    with pytest.raises(InvalidAddress):
        normalize_address(address)


def test_is_url():
    """URL detection requires scheme and host."""
    assert is_url("https://example.com") is True
    assert is_url("localhost:8080") is False
    assert is_url("http://example.com:notaport") is False


def test_join_url():
    """Path segments are joined with a single slash."""
    assert join_url("http://10.0.0.1:8080", "request-channel") == "http://10.0.0.1:8080/request-channel"
    assert join_url("http://10.0.0.1:8080/", "/request-channel") == "http://10.0.0.1:8080/request-channel"
    assert join_url("https://example.com/lnurl", "auth-challenge") == "https://example.com/lnurl/auth-challenge"
