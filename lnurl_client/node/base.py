"""Common interface for talking to the local Core Lightning node."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

from ..exceptions import NodeError
from ..lnurl.models import Invoice, NodeIdentity, PeerURI

logger = logging.getLogger(__name__)


class NodeClient(ABC):
    """
    Capabilities of the local Lightning node used by the LNURL flows.

    Backends only implement ``call``; the typed operations and the
    validation of response shapes live here.
    """

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        """Release the connection to the node."""

    @abstractmethod
    def call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Invoke a node RPC method.

        Args:
            method: RPC method name
            payload: Keyword parameters

        Returns:
            Decoded JSON result

        Raises:
            NodeError: If the call fails
        """

    def _field(self, result: Any, method: str, key: str) -> str:
        if not isinstance(result, dict) or not isinstance(result.get(key), str):
            raise NodeError(f"Unexpected response from {method}: missing '{key}'")
        return result[key]

    def get_identity(self) -> NodeIdentity:
        """
        Get this node's public key.

        Returns:
            NodeIdentity of the local node
        """
        result = self.call("getinfo", {})
        pubkey = self._field(result, "getinfo", "id")
        logger.info(f"Node pubkey: {pubkey}")
        return NodeIdentity(public_key=pubkey)

    def connect_peer(self, peer: PeerURI) -> None:
        """
        Connect to a remote node.

        Args:
            peer: Remote node address
        """
        logger.info(f"Connecting to node {peer}...")
        result = self.call("connect", {
            "id": peer.public_key,
            "host": peer.host,
            "port": peer.port,
        })
        if not isinstance(result, dict):
            raise NodeError("Unexpected response from connect")
        logger.debug(f"Connected: {result}")

    def create_invoice(self, amount_msat: int, label: str, description: str) -> Invoice:
        """
        Create a BOLT11 invoice.

        Args:
            amount_msat: Invoice amount in millisatoshis
            label: Label, unique across every invoice of the node
            description: Human-readable memo

        Returns:
            Invoice with the encoded payment request
        """
        logger.debug(f"Creating invoice {label}: {amount_msat} msat")
        result = self.call("invoice", {
            "amount_msat": amount_msat,
            "label": label,
            "description": description,
        })
        bolt11 = self._field(result, "invoice", "bolt11")
        return Invoice(payment_request=bolt11, label=label)

    def sign_message(self, message: str) -> str:
        """
        Sign a message with the node key.

        Args:
            message: Text to sign

        Returns:
            zbase encoded signature
        """
        result = self.call("signmessage", {"message": message})
        return self._field(result, "signmessage", "zbase")
