"""Node client speaking JSON-RPC over the Core Lightning unix socket."""

import logging
from typing import Any, Dict

from pyln.client import LightningRpc, RpcError

from ..exceptions import NodeError
from .base import NodeClient

logger = logging.getLogger(__name__)


class SocketNodeClient(NodeClient):
    """Talks to lightningd in-process through pyln-client."""

    def __init__(self, rpc_path: str):
        """
        Initialize socket client.

        Args:
            rpc_path: Path to the lightning-rpc unix socket
        """
        self.rpc_path = rpc_path
        self._rpc = LightningRpc(rpc_path)

        logger.debug(f"SocketNodeClient initialized for {rpc_path}")

    def call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return self._rpc.call(method, payload)
        except RpcError as e:
            message = e.error.get("message") if isinstance(e.error, dict) else e.error
            raise NodeError(f"{method} failed: {message}")
        except OSError as e:
            raise NodeError(f"Cannot reach node RPC at {self.rpc_path}: {e}")
