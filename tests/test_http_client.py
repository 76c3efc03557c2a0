"""Tests for the LNURL HTTP client."""

import pytest
from unittest.mock import Mock, patch
import httpx

from lnurl_client.exceptions import NetworkError, ProtocolError
from lnurl_client.lnurl.http import HttpResponse, LNURLHttpClient


def _response(status_code=200, text=""):
    response = Mock()
    response.status_code = status_code
    response.text = text
    return response


def test_client_initialization():
    """Test HTTP client initialization."""
    client = LNURLHttpClient(timeout=12.5)

    assert client.timeout == 12.5
    client.close()


def test_client_context_manager():
    """Test HTTP client context manager."""
    with LNURLHttpClient() as client:
        assert client is not None


@patch('httpx.Client.get')
def test_get_returns_status_and_body(mock_get):
    """Test a completed request."""
    mock_get.return_value = _response(200, "abc123")

    with LNURLHttpClient() as client:
        response = client.get("http://10.0.0.1:8080/auth-challenge")

    assert response == HttpResponse(200, "abc123")
    assert response.is_success is True
    mock_get.assert_called_once_with("http://10.0.0.1:8080/auth-challenge", params=None)


@patch('httpx.Client.get')
def test_get_passes_query_params(mock_get):
    """Test query parameters are handed to httpx for encoding."""
    mock_get.return_value = _response(200, "{}")

    with LNURLHttpClient() as client:
        client.get("http://10.0.0.1:8080/withdraw", params={"k1": "ab", "pr": "lntb1+/="})

    mock_get.assert_called_once_with(
        "http://10.0.0.1:8080/withdraw",
        params={"k1": "ab", "pr": "lntb1+/="},
    )


@patch('httpx.Client.get')
def test_timeout_names_host_and_port(mock_get):
    """Test a timeout becomes a NetworkError naming the target."""
    mock_get.side_effect = httpx.ConnectTimeout("timed out")

    with LNURLHttpClient() as client:
        with pytest.raises(NetworkError) as exc_info:
            client.get("http://192.168.1.10:8080/request-channel")

    assert "192.168.1.10:8080" in str(exc_info.value)
    assert "firewall" in str(exc_info.value)
    assert exc_info.value.host == "192.168.1.10"
    assert exc_info.value.port == 8080


@patch('httpx.Client.get')
def test_connection_refused_uses_default_port(mock_get):
    """Test the scheme default port is reported when none is given."""
    mock_get.side_effect = httpx.ConnectError("Connection refused")

    with LNURLHttpClient() as client:
        with pytest.raises(NetworkError) as exc_info:
            client.get("https://lnurl.example.com/request-withdraw")

    assert exc_info.value.host == "lnurl.example.com"
    assert exc_info.value.port == 443


@patch('httpx.Client.get')
def test_read_error_is_network_error(mock_get):
    """Test other transport failures are network errors."""
    mock_get.side_effect = httpx.ReadError("connection reset")

    with LNURLHttpClient() as client:
        with pytest.raises(NetworkError, match="connection reset"):
            client.get("http://10.0.0.1/request-withdraw")


@patch('httpx.Client.get')
def test_unsupported_scheme_is_protocol_error(mock_get):
    """Test a callback URL httpx cannot use is a protocol error."""
    mock_get.side_effect = httpx.UnsupportedProtocol("Request URL has an unsupported protocol 'ftp://'")

    with LNURLHttpClient() as client:
        with pytest.raises(ProtocolError, match="Invalid URL"):
            client.get("ftp://10.0.0.1/callback")


@patch('httpx.Client.get')
def test_get_json(mock_get):
    """Test JSON decoding."""
    mock_get.return_value = _response(200, '{"status": "OK"}')

    with LNURLHttpClient() as client:
        assert client.get_json("http://10.0.0.1/cb") == {"status": "OK"}


@patch('httpx.Client.get')
def test_get_json_error_status_surfaces_body(mock_get):
    """Test a non-2xx status surfaces the body verbatim."""
    mock_get.return_value = _response(500, "payment failed: no route")

    with LNURLHttpClient() as client:
        with pytest.raises(ProtocolError) as exc_info:
            client.get_json("http://10.0.0.1/cb", what="Withdraw request")

    assert str(exc_info.value) == "Withdraw request failed (HTTP 500): payment failed: no route"
    assert exc_info.value.status_code == 500
    assert exc_info.value.body == "payment failed: no route"


@patch('httpx.Client.get')
def test_get_json_error_status_without_body(mock_get):
    """Test an empty error body is reported as such."""
    mock_get.return_value = _response(404, "")

    with LNURLHttpClient() as client:
        with pytest.raises(ProtocolError, match=r"HTTP 404\): \(no body\)"):
            client.get_json("http://10.0.0.1/cb")


@patch('httpx.Client.get')
def test_get_json_invalid_body(mock_get):
    """Test a non-JSON body is a protocol error."""
    mock_get.return_value = _response(200, "<html>oops</html>")

    with LNURLHttpClient() as client:
        with pytest.raises(ProtocolError, match="not JSON"):
            client.get_json("http://10.0.0.1/cb")


@patch('httpx.HTTPTransport.handle_request')
def test_redirects_are_followed(mock_handle):
    """Test a moved endpoint is reached through its redirect."""
    mock_handle.side_effect = [
        httpx.Response(301, headers={"Location": "/v2/request-withdraw"}),
        httpx.Response(200, text='{"tag": "withdrawRequest"}'),
    ]

    with LNURLHttpClient() as client:
        payload = client.get_json("http://10.0.0.1:8080/request-withdraw", what="Withdraw request")

    assert payload == {"tag": "withdrawRequest"}
    assert mock_handle.call_count == 2
    assert str(mock_handle.call_args[0][0].url) == "http://10.0.0.1:8080/v2/request-withdraw"
