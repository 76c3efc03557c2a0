"""Auth service for LNURL-auth style challenge signing."""

import logging
from enum import Enum

from ..exceptions import LNURLClientError
from ..lnurl.address import join_url
from ..lnurl.http import LNURLHttpClient, ensure_success
from ..lnurl.models import UNKNOWN_ERROR, AuthChallenge, AuthOutcome, parse_model
from ..node.base import NodeClient

logger = logging.getLogger(__name__)


class AuthState(str, Enum):
    INIT = "init"
    CHALLENGE_RECEIVED = "challenge_received"
    SIGNED = "signed"
    RESPONSE_SUBMITTED = "response_submitted"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class AuthService:
    """
    Service proving ownership of the local node to an LNURL server.

    The node signs the server's k1 challenge; the server checks the
    signature against our public key.
    """

    def __init__(
        self,
        node_client: NodeClient,
        http_client: LNURLHttpClient,
        challenge_path: str = "auth-challenge",
        response_path: str = "auth-response",
    ):
        self.node_client = node_client
        self.http_client = http_client
        self.challenge_path = challenge_path
        self.response_path = response_path
        self.state = AuthState.INIT

        logger.debug("AuthService initialized")

    def _transition(self, state: AuthState) -> None:
        logger.info(f"Auth: {self.state.value} -> {state.value}")
        self.state = state

    def fetch_challenge(self, base_url: str) -> AuthChallenge:
        """Fetch the k1 challenge, given bare or as {"k1": ...}."""
        url = join_url(base_url, self.challenge_path)
        logger.info(f"Requesting auth challenge from {url}...")

        response = self.http_client.get(url)
        ensure_success(response, "Auth challenge")
        challenge = AuthChallenge.from_body(response.body)

        logger.info(f"Received k1: {challenge.k1}")
        return challenge

    def authenticate(self, base_url: str) -> AuthOutcome:
        """
        Run the auth flow.

        Args:
            base_url: Normalized server URL

        Returns:
            AuthOutcome; ``state`` is SUCCEEDED or FAILED accordingly

        Raises:
            NetworkError: If the server cannot be reached
            ProtocolError: If the server answers outside the protocol
            NodeError: If the local node fails
        """
        self.state = AuthState.INIT
        try:
            return self._run(base_url)
        except LNURLClientError:
            self._transition(AuthState.FAILED)
            raise

    def _run(self, base_url: str) -> AuthOutcome:
        identity = self.node_client.get_identity()

        challenge = self.fetch_challenge(base_url)
        self._transition(AuthState.CHALLENGE_RECEIVED)

        logger.info("Signing challenge...")
        signature = self.node_client.sign_message(challenge.k1)
        logger.debug(f"Signature (zbase): {signature[:24]}...")
        self._transition(AuthState.SIGNED)

        logger.info("Submitting auth response...")
        payload = self.http_client.get_json(
            join_url(base_url, self.response_path),
            params={
                "k1": challenge.k1,
                "signature": signature,
                "pubkey": identity.public_key,
            },
            what="Auth response",
        )
        self._transition(AuthState.RESPONSE_SUBMITTED)
        outcome = parse_model(AuthOutcome, payload, "auth response")

        if outcome.ok:
            self._transition(AuthState.SUCCEEDED)
        else:
            if not outcome.reason:
                outcome = outcome.model_copy(update={"reason": UNKNOWN_ERROR})
            logger.info(f"Authentication refused: {outcome.reason}")
            self._transition(AuthState.FAILED)

        return outcome
