"""Normalization of user supplied LNURL server addresses."""

import ipaddress
import logging
from typing import Optional, Union
from urllib.parse import urlsplit

from ..exceptions import InvalidAddress
from .encoding import decode_lnurl, is_lnurl

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


def _parse_ip(value: str) -> Optional[IPAddress]:
    try:
        return ipaddress.ip_address(value)
    except ValueError:
        return None


def _parse_port(value: str) -> Optional[int]:
    if not value.isdigit() or not value.isascii():
        return None
    port = int(value)
    if port > 65535:
        return None
    return port


def _format_host(ip: IPAddress) -> str:
    if ip.version == 6:
        return f"[{ip}]"
    return str(ip)


def is_url(value: str) -> bool:
    """
    Check whether value is a well-formed URL with scheme and host.

    Args:
        value: Candidate URL

    Returns:
        True if the URL has a scheme, a host and a valid port (if any)
    """
    try:
        parsed = urlsplit(value)
        # .port raises ValueError for out-of-range or non-numeric ports
        parsed.port
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.hostname)


def normalize_address(value: str) -> str:
    """
    Turn a URL, LNURL or bare IP[:port] into a base URL.

    Accepted forms, in order of precedence:
        - bech32 LNURL (``lnurl1...``, optionally ``lightning:`` prefixed)
        - a well-formed URL, returned unchanged
        - ``[IPv6]:port``
        - ``IPv4:port`` or ``IPv6:port``
        - a bare IPv4 or IPv6 address (scheme default port)

    Args:
        value: Address given by the user

    Returns:
        Base URL usable for HTTP requests

    Raises:
        InvalidAddress: If the address cannot be interpreted
    """
    text = value.strip()
    if not text:
        raise InvalidAddress("Empty server address")

    if is_lnurl(text):
        text = decode_lnurl(text)
        if is_url(text):
            return text
        raise InvalidAddress(f"LNURL does not decode to a URL: {value}")

    if is_url(text):
        return text

    # [IPv6]:port
    if text.startswith("[") and "]:" in text:
        bracket_end = text.find("]:")
        ip = _parse_ip(text[1:bracket_end])
        port = _parse_port(text[bracket_end + 2:])
        if ip is not None and ip.version == 6 and port is not None:
            url = f"http://[{ip}]:{port}"
            logger.debug(f"Normalized {value!r} to {url}")
            return url

    # IPv4:port or IPv6:port
    if ":" in text:
        host_part, _, port_part = text.rpartition(":")
        ip = _parse_ip(host_part)
        port = _parse_port(port_part)
        if ip is not None and port is not None:
            url = f"http://{_format_host(ip)}:{port}"
            logger.debug(f"Normalized {value!r} to {url}")
            return url

    ip = _parse_ip(text)
    if ip is not None:
        url = f"http://{_format_host(ip)}"
        logger.debug(f"Normalized {value!r} to {url}")
        return url

    raise InvalidAddress(f"Invalid URL or IP address: {value}")


def join_url(base: str, path: str) -> str:
    """Append a path segment to a base URL."""
    return f"{base.rstrip('/')}/{path.lstrip('/')}"
