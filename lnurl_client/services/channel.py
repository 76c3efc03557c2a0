"""Channel request service for LNURL inbound channel opens."""

import logging
from enum import Enum

from ..exceptions import LNURLClientError
from ..lnurl.address import join_url
from ..lnurl.http import LNURLHttpClient
from ..lnurl.models import (
    CHANNEL_REQUEST_TAG,
    UNKNOWN_ERROR,
    ChannelOutcome,
    ChannelParameters,
    PeerURI,
    parse_model,
    raise_for_lnurl_error,
)
from ..node.base import NodeClient

logger = logging.getLogger(__name__)


class ChannelState(str, Enum):
    INIT = "init"
    PARAMS_FETCHED = "params_fetched"
    PEER_CONNECTED = "peer_connected"
    OPEN_REQUESTED = "open_requested"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ChannelRequestService:
    """
    Service for asking an LNURL server to open a channel to this node.

    Fetches the channel parameters, connects to the server's node and
    calls back with our node id.
    """

    def __init__(
        self,
        node_client: NodeClient,
        http_client: LNURLHttpClient,
        local_address: str = "127.0.0.1:49735",
        request_path: str = "request-channel",
    ):
        """
        Initialize channel request service.

        Args:
            node_client: Local node client
            http_client: LNURL HTTP client
            local_address: host:port advertised in our node URI
            request_path: Path of the channel request endpoint
        """
        self.node_client = node_client
        self.http_client = http_client
        self.local_address = local_address
        self.request_path = request_path
        self.state = ChannelState.INIT

        logger.debug("ChannelRequestService initialized")

    def _transition(self, state: ChannelState) -> None:
        logger.info(f"Channel request: {self.state.value} -> {state.value}")
        self.state = state

    def fetch_parameters(self, base_url: str) -> ChannelParameters:
        """
        Fetch channel parameters from the server.

        Args:
            base_url: Normalized server URL

        Returns:
            ChannelParameters
        """
        url = join_url(base_url, self.request_path)
        logger.info(f"Requesting channel info from {url}...")

        payload = self.http_client.get_json(url, what="Channel request")
        raise_for_lnurl_error(payload, "channel request")
        params = parse_model(ChannelParameters, payload, "channel request")

        if params.tag and params.tag != CHANNEL_REQUEST_TAG:
            logger.warning(f"Unexpected tag in channel request: {params.tag}")

        logger.debug(f"Channel request: uri={params.peer_uri} callback={params.callback_url}")
        return params

    def request_channel(self, base_url: str) -> ChannelOutcome:
        """
        Run the channel request flow.

        Args:
            base_url: Normalized server URL

        Returns:
            ChannelOutcome; ``state`` is SUCCEEDED or FAILED accordingly

        Raises:
            NetworkError: If the server cannot be reached
            ProtocolError: If the server answers outside the protocol
            NodeError: If the local node fails
        """
        self.state = ChannelState.INIT
        try:
            return self._run(base_url)
        except LNURLClientError:
            self._transition(ChannelState.FAILED)
            raise

    def _run(self, base_url: str) -> ChannelOutcome:
        identity = self.node_client.get_identity()
        node_uri = f"{identity.public_key}@{self.local_address}"
        logger.info(f"Node URI: {node_uri}")

        params = self.fetch_parameters(base_url)
        self._transition(ChannelState.PARAMS_FETCHED)

        peer = PeerURI.parse(params.peer_uri)
        self.node_client.connect_peer(peer)
        self._transition(ChannelState.PEER_CONNECTED)

        logger.info("Requesting channel open...")
        payload = self.http_client.get_json(
            params.callback_url,
            params={"remoteid": identity.public_key, "k1": params.k1},
            what="Channel open",
        )
        outcome = parse_model(ChannelOutcome, payload, "channel open response")
        self._transition(ChannelState.OPEN_REQUESTED)

        if outcome.ok:
            self._transition(ChannelState.SUCCEEDED)
        else:
            if not outcome.reason:
                outcome = outcome.model_copy(update={"reason": UNKNOWN_ERROR})
            logger.info(f"Channel open refused: {outcome.reason}")
            self._transition(ChannelState.FAILED)

        return outcome
