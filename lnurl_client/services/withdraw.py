"""Withdraw service for LNURL-withdraw requests."""

import logging
import time
from enum import Enum
from typing import Optional

from ..exceptions import LNURLClientError, ValidationError
from ..lnurl.address import join_url
from ..lnurl.http import LNURLHttpClient
from ..lnurl.models import (
    WITHDRAW_REQUEST_TAG,
    UNKNOWN_ERROR,
    Invoice,
    WithdrawOutcome,
    WithdrawParameters,
    parse_model,
    raise_for_lnurl_error,
)
from ..node.base import NodeClient

logger = logging.getLogger(__name__)


class WithdrawState(str, Enum):
    INIT = "init"
    PARAMS_FETCHED = "params_fetched"
    RANGE_VALIDATED = "range_validated"
    INVOICE_CREATED = "invoice_created"
    WITHDRAW_SUBMITTED = "withdraw_submitted"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class WithdrawService:
    """
    Service for receiving a payment from an LNURL-withdraw server.

    Fetches the withdraw limits, creates an invoice on the local node
    and hands it to the server's callback for payment.
    """

    def __init__(
        self,
        node_client: NodeClient,
        http_client: LNURLHttpClient,
        request_path: str = "request-withdraw",
    ):
        """
        Initialize withdraw service.

        Args:
            node_client: Local node client
            http_client: LNURL HTTP client
            request_path: Path of the withdraw request endpoint
        """
        self.node_client = node_client
        self.http_client = http_client
        self.request_path = request_path
        self.state = WithdrawState.INIT
        self.invoice: Optional[Invoice] = None

        logger.debug("WithdrawService initialized")

    def _transition(self, state: WithdrawState) -> None:
        logger.info(f"Withdraw: {self.state.value} -> {state.value}")
        self.state = state

    @staticmethod
    def make_label() -> str:
        """Build an invoice label unique to this attempt."""
        return f"lnurl-withdraw-{time.time_ns() // 1_000_000}"

    def fetch_parameters(self, base_url: str) -> WithdrawParameters:
        """
        Fetch withdraw parameters from the server.

        Args:
            base_url: Normalized server URL

        Returns:
            WithdrawParameters
        """
        url = join_url(base_url, self.request_path)
        logger.info(f"Requesting withdrawal info from {url}...")

        payload = self.http_client.get_json(url, what="Withdraw request")
        raise_for_lnurl_error(payload, "withdraw request")
        params = parse_model(WithdrawParameters, payload, "withdraw request")

        if params.tag and params.tag != WITHDRAW_REQUEST_TAG:
            logger.warning(f"Unexpected tag in withdraw request: {params.tag}")

        logger.debug(
            f"Withdraw request: callback={params.callback_url} "
            f"range=[{params.min_withdrawable_msat}, {params.max_withdrawable_msat}] msat"
        )
        return params

    def withdraw(
        self,
        base_url: str,
        amount_msat: int,
        description: Optional[str] = None,
    ) -> WithdrawOutcome:
        """
        Run the withdraw flow.

        Args:
            base_url: Normalized server URL
            amount_msat: Amount to receive in millisatoshis
            description: Invoice description (server default if None)

        Returns:
            WithdrawOutcome; ``state`` is SUCCEEDED or FAILED accordingly

        Raises:
            ValidationError: If amount_msat is outside the server's range
            NetworkError: If the server cannot be reached
            ProtocolError: If the server answers outside the protocol
            NodeError: If the invoice cannot be created
        """
        self.state = WithdrawState.INIT
        self.invoice = None
        try:
            return self._run(base_url, amount_msat, description)
        except LNURLClientError:
            self._transition(WithdrawState.FAILED)
            raise

    def _run(self, base_url: str, amount_msat: int, description: Optional[str]) -> WithdrawOutcome:
        params = self.fetch_parameters(base_url)
        self._transition(WithdrawState.PARAMS_FETCHED)

        if not params.allows(amount_msat):
            raise ValidationError(
                f"Amount {amount_msat} msat is outside allowed range "
                f"[{params.min_withdrawable_msat}, {params.max_withdrawable_msat}]"
            )
        self._transition(WithdrawState.RANGE_VALIDATED)

        if description is None:
            description = params.default_description
        logger.info(f"Creating invoice for {amount_msat} msat with description: {description}...")

        # An invoice left behind by a failed submission is not cleaned up
        self.invoice = self.node_client.create_invoice(
            amount_msat=amount_msat,
            label=self.make_label(),
            description=description,
        )
        logger.info(f"Invoice created: {self.invoice.payment_request[:50]}...")
        self._transition(WithdrawState.INVOICE_CREATED)

        logger.info("Submitting withdrawal request...")
        payload = self.http_client.get_json(
            params.callback_url,
            params={"k1": params.k1, "pr": self.invoice.payment_request},
            what="Withdraw request",
        )
        self._transition(WithdrawState.WITHDRAW_SUBMITTED)
        outcome = parse_model(WithdrawOutcome, payload, "withdraw response")

        if outcome.ok:
            self._transition(WithdrawState.SUCCEEDED)
        else:
            if not outcome.reason:
                outcome = outcome.model_copy(update={"reason": UNKNOWN_ERROR})
            logger.info(f"Withdrawal refused: {outcome.reason}")
            self._transition(WithdrawState.FAILED)

        return outcome
