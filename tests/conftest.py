"""Pytest configuration and fixtures."""

import pytest
from unittest.mock import Mock

PUBKEY = "02" + "a" * 64
REMOTE_PUBKEY = "03" + "b" * 64
BASE_URL = "http://10.0.0.1:8080"
BOLT11 = "lntb10u1pjexample0qqsp5zyg3zyg3zyg3zyg3zyg3zyg3zyg3zyg3zyg3zyg3zyg3zyg3zygs"


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that require a running Core Lightning node"
    )


@pytest.fixture
def mock_config(tmp_path):
    """Configuration for testing."""
    from lnurl_client.config import Config

    return Config(
        cln_rpc_path=str(tmp_path / "lightning-rpc"),
        node_backend="rpc",
        http_timeout=5.0,
        log_level="DEBUG",
        log_file=None,
    )


@pytest.fixture
def mock_node_client():
    """Mock node client for testing."""
    from lnurl_client.lnurl.models import Invoice, NodeIdentity
    from lnurl_client.node.base import NodeClient

    client = Mock(spec=NodeClient)
    client.get_identity = Mock(return_value=NodeIdentity(public_key=PUBKEY))
    client.connect_peer = Mock(return_value=None)
    client.create_invoice = Mock(
        side_effect=lambda amount_msat, label, description: Invoice(
            payment_request=BOLT11,
            label=label,
        )
    )
    client.sign_message = Mock(return_value="d7abcdefzbasesignature")

    return client


@pytest.fixture
def mock_http_client():
    """Mock LNURL HTTP client for testing."""
    from lnurl_client.lnurl.http import LNURLHttpClient

    return Mock(spec=LNURLHttpClient)


@pytest.fixture
def channel_params():
    """Channel request response."""
    return {
        "uri": f"{REMOTE_PUBKEY}@10.0.0.2:9735",
        "callback": "http://10.0.0.1:8080/open-channel",
        "k1": "c0ffee",
        "tag": "channelRequest",
    }


@pytest.fixture
def withdraw_params():
    """Withdraw request response."""
    return {
        "callback": "http://10.0.0.1:8080/withdraw",
        "k1": "deadbeef",
        "tag": "withdrawRequest",
        "defaultDescription": "LNURL withdraw",
        "minWithdrawable": 1000,
        "maxWithdrawable": 100000,
    }


@pytest.fixture
def sample_lnurl():
    """Sample LNURL (encodes https://service.com/api?q=...)."""
    return (
        "LNURL1DP68GURN8GHJ7UM9WFMXJCM99E3K7MF0V9CXJ0M385EKVCENXC6R2C35XVUKXEFCV5MKV"
        "V34X5EKZD3EV56NYD3HXQURZEPEXEJXXEPNXSCRVWFNV9NXZCN9XQ6XYEFHVGCXXCMYXYMNSERXFQ5FNS"
    )
