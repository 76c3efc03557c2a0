"""HTTP client for talking to LNURL servers."""

import json
import logging
from typing import Any, Dict, NamedTuple, Optional

import httpx

from ..exceptions import NetworkError, ProtocolError

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}


class HttpResponse(NamedTuple):
    """Status code and body of a completed HTTP call."""

    status_code: int
    body: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


def _host_and_port(url: str):
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        return "", 0
    port = parsed.port or DEFAULT_PORTS.get(parsed.scheme, 80)
    return parsed.host, port


class LNURLHttpClient:
    """
    Client for GET requests against LNURL servers.

    Every request shares a single timeout (connect + read). Redirects are
    followed; no request is retried.
    """

    def __init__(self, timeout: float = 60.0):
        """
        Initialize HTTP client.

        Args:
            timeout: Request timeout in seconds
        """
        self.timeout = timeout
        self._client = httpx.Client(
            timeout=timeout,
            headers={"Accept": "application/json"},
            follow_redirects=True,
        )

        logger.debug(f"LNURLHttpClient initialized (timeout: {timeout}s)")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close HTTP client."""
        self._client.close()

    def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> HttpResponse:
        """
        Perform a GET request.

        Query parameters are URL-encoded and merged with any query string
        already present in url.

        Args:
            url: Target URL
            params: Optional query parameters

        Returns:
            HttpResponse with status code and body

        Raises:
            NetworkError: If the request could not complete
            ProtocolError: If url is not a usable HTTP URL
        """
        host, port = _host_and_port(url)
        logger.debug(f"GET {url} params={params}")

        try:
            response = self._client.get(url, params=params)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise ProtocolError(f"Invalid URL {url!r}: {e}")
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            raise NetworkError(
                f"Request to {host}:{port} failed: {e}. Check: same network, "
                f"firewall, server listening on 0.0.0.0:{port}",
                host=host,
                port=port,
            )
        except httpx.HTTPError as e:
            raise NetworkError(
                f"Request to {host}:{port} failed: {e}",
                host=host,
                port=port,
            )

        logger.debug(f"Response {response.status_code} from {host}:{port}")
        return HttpResponse(response.status_code, response.text)

    def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        what: str = "response",
    ) -> Any:
        """
        Perform a GET request and decode a JSON body.

        Args:
            url: Target URL
            params: Optional query parameters
            what: Human readable name of the request for error messages

        Returns:
            Decoded JSON

        Raises:
            NetworkError: If the request could not complete
            ProtocolError: On a non-2xx status or a body that is not JSON
        """
        response = self.get(url, params=params)
        ensure_success(response, what)

        try:
            return json.loads(response.body)
        except ValueError as e:
            raise ProtocolError(
                f"Invalid {what}: body is not JSON ({e})",
                status_code=response.status_code,
                body=response.body,
            )


def ensure_success(response: HttpResponse, what: str) -> None:
    """
    Raise ProtocolError for a non-2xx response, surfacing its body.

    Args:
        response: Completed HTTP response
        what: Human readable name of the request for error messages
    """
    if response.is_success:
        return
    body = response.body or "(no body)"
    raise ProtocolError(
        f"{what} failed (HTTP {response.status_code}): {body}",
        status_code=response.status_code,
        body=response.body,
    )
