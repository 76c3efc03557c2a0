"""Application wiring for the LNURL client."""

import logging
from typing import Optional

from .config import load_config, Config
from .lnurl.http import LNURLHttpClient
from .node import NodeClient, create_node_client
from .services.auth import AuthService
from .services.channel import ChannelRequestService
from .services.withdraw import WithdrawService

logger = logging.getLogger(__name__)


class Application:
    """Main application class for the LNURL client."""

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize application.

        Args:
            config: Optional configuration (will load from env if not provided)
        """
        if config is None:
            config = load_config()

        self.config = config
        self.config.setup_logging()

        logger.info(f"Configuration: {self.config}")

        self.node_client: Optional[NodeClient] = None
        self.http_client: Optional[LNURLHttpClient] = None
        self.channel_service: Optional[ChannelRequestService] = None
        self.withdraw_service: Optional[WithdrawService] = None
        self.auth_service: Optional[AuthService] = None

        self._initialized = False

    def initialize(self) -> None:
        """Initialize all application components."""
        if self._initialized:
            logger.warning("Application already initialized")
            return

        try:
            logger.info(f"Initializing node client ({self.config.node_backend})...")
            if self.node_client is None:
                self.node_client = create_node_client(**self.config.get_node_config())

            if self.http_client is None:
                self.http_client = LNURLHttpClient(timeout=self.config.http_timeout)

            self.channel_service = ChannelRequestService(
                node_client=self.node_client,
                http_client=self.http_client,
                local_address=self.config.local_node_address(),
                request_path=self.config.channel_request_path,
            )
            self.withdraw_service = WithdrawService(
                node_client=self.node_client,
                http_client=self.http_client,
                request_path=self.config.withdraw_request_path,
            )
            self.auth_service = AuthService(
                node_client=self.node_client,
                http_client=self.http_client,
                challenge_path=self.config.auth_challenge_path,
                response_path=self.config.auth_response_path,
            )

            self._initialized = True
            logger.info("All components initialized successfully")

        except Exception:
            self.cleanup()
            raise

    def cleanup(self) -> None:
        """Release the node and HTTP clients."""
        logger.debug("Cleaning up application resources...")

        if self.http_client:
            try:
                self.http_client.close()
            except Exception as e:
                logger.warning(f"Error closing HTTP client: {e}")

        if self.node_client:
            try:
                self.node_client.close()
            except Exception as e:
                logger.warning(f"Error closing node client: {e}")

        self._initialized = False
        logger.debug("Cleanup complete")

    def __enter__(self):
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cleanup()
