"""Clients for the local Core Lightning node."""

from .base import NodeClient
from .lightning_cli import CommandNodeClient
from .rpc import SocketNodeClient

__all__ = ["NodeClient", "CommandNodeClient", "SocketNodeClient", "create_node_client"]


def create_node_client(backend: str, rpc_path: str, lightning_cli: str = "lightning-cli") -> NodeClient:
    """
    Build the node client selected by configuration.

    Args:
        backend: 'rpc' for the unix socket, 'cli' for lightning-cli
        rpc_path: Path to the lightning-rpc unix socket
        lightning_cli: Path or command name for lightning-cli

    Returns:
        NodeClient instance
    """
    if backend == "rpc":
        return SocketNodeClient(rpc_path)
    if backend == "cli":
        return CommandNodeClient(rpc_path, lightning_cli=lightning_cli)
    raise ValueError(f"Unsupported node backend: {backend}")
