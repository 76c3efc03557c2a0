"""Node client driving the lightning-cli command-line tool."""

import json
import logging
import subprocess
from typing import Any, Dict, List

from ..exceptions import NodeError
from .base import NodeClient

logger = logging.getLogger(__name__)


class CommandNodeClient(NodeClient):
    """Invokes lightning-cli in a subprocess for every call."""

    def __init__(self, rpc_path: str, lightning_cli: str = "lightning-cli"):
        """
        Initialize command client.

        Args:
            rpc_path: Path to the lightning-rpc unix socket
            lightning_cli: Path or command name for the lightning-cli binary
        """
        self.rpc_path = rpc_path
        self.lightning_cli = lightning_cli

        logger.debug(f"CommandNodeClient initialized ({lightning_cli}, {rpc_path})")

    def _command(self, method: str, payload: Dict[str, Any]) -> List[str]:
        # -k passes parameters by name, so their order does not matter.
        # Strings are quoted so "", "1234" or "true" stay JSON strings.
        args = [
            f"{key}={json.dumps(value) if isinstance(value, str) else value}"
            for key, value in payload.items()
            if value is not None
        ]
        return [self.lightning_cli, f"--rpc-file={self.rpc_path}", "-k", method, *args]

    def call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        cmd = self._command(method, payload)
        logger.debug(f"Running: {' '.join(cmd[:4])}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise NodeError(f"Cannot run {self.lightning_cli}: {e}")

        if result.returncode != 0:
            # lightning-cli prints JSON-RPC errors on stdout
            detail = result.stderr.strip() or result.stdout.strip()
            try:
                error = json.loads(result.stdout)
                detail = error.get("message", detail)
            except (ValueError, AttributeError):
                pass
            raise NodeError(f"{method} failed: {detail}")

        try:
            return json.loads(result.stdout)
        except ValueError as e:
            raise NodeError(f"Invalid JSON from lightning-cli {method}: {e}")
