"""Wire models for LNURL server responses and node results."""

import ipaddress
import json
import logging
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..exceptions import ProtocolError

logger = logging.getLogger(__name__)

STATUS_OK = "OK"
STATUS_ERROR = "ERROR"
UNKNOWN_ERROR = "Unknown error"

CHANNEL_REQUEST_TAG = "channelRequest"
WITHDRAW_REQUEST_TAG = "withdrawRequest"

_PUBKEY_RE = re.compile(r"^(02|03)[0-9a-fA-F]{64}$")


class LNURLModel(BaseModel):
    """Base for models parsed from server JSON."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class ChannelParameters(LNURLModel):
    """Parameters returned by the channel request endpoint."""

    peer_uri: str = Field(alias="uri")
    callback_url: str = Field(alias="callback")
    k1: str
    tag: str = ""


class ChannelOutcome(LNURLModel):
    """Result of the channel open callback."""

    status: str
    reason: Optional[str] = None
    transaction_id: Optional[str] = Field(default=None, alias="txid")
    channel_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status.upper() == STATUS_OK


class WithdrawParameters(LNURLModel):
    """Parameters returned by the withdraw request endpoint."""

    callback_url: str = Field(alias="callback")
    k1: str
    tag: str = ""
    default_description: str = Field(default="", alias="defaultDescription")
    min_withdrawable_msat: int = Field(alias="minWithdrawable", ge=0)
    max_withdrawable_msat: int = Field(alias="maxWithdrawable", ge=0)

    @model_validator(mode="after")
    def check_range(self) -> "WithdrawParameters":
        if self.min_withdrawable_msat > self.max_withdrawable_msat:
            raise ValueError(
                f"minWithdrawable ({self.min_withdrawable_msat}) exceeds "
                f"maxWithdrawable ({self.max_withdrawable_msat})"
            )
        return self

    def allows(self, amount_msat: int) -> bool:
        """Check whether amount_msat lies inside the withdrawable range."""
        return self.min_withdrawable_msat <= amount_msat <= self.max_withdrawable_msat


class WithdrawOutcome(LNURLModel):
    """Result of the withdraw callback."""

    status: str
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status.upper() == STATUS_OK


class AuthOutcome(LNURLModel):
    """Result of the auth response endpoint."""

    status: str
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status.upper() == STATUS_OK


class AuthChallenge(LNURLModel):
    """Challenge token to be signed by the node."""

    k1: str

    @classmethod
    def from_body(cls, body: str) -> "AuthChallenge":
        """
        Parse a challenge from a response body.

        The server may send either the bare token or a JSON object
        ``{"k1": "<token>"}``; both yield the same challenge.

        Args:
            body: Raw response body

        Returns:
            AuthChallenge instance

        Raises:
            ProtocolError: If the body carries no usable token
        """
        text = body.strip()
        if text.startswith("{"):
            try:
                payload = json.loads(text)
            except ValueError as e:
                raise ProtocolError(f"Invalid auth challenge JSON: {e}", body=body)
            k1 = payload.get("k1") if isinstance(payload, dict) else None
            if not isinstance(k1, str):
                raise ProtocolError("Auth challenge JSON has no 'k1' string", body=body)
            text = k1.strip()

        if not text:
            raise ProtocolError("Empty auth challenge", body=body)

        return cls(k1=text)


class NodeIdentity(BaseModel):
    """Identity of the local node."""

    public_key: str


class Invoice(BaseModel):
    """BOLT11 invoice created by the local node."""

    payment_request: str
    label: str


class PeerURI(BaseModel):
    """Remote node address in the form pubkey@host:port."""

    public_key: str
    host: str
    port: int

    @classmethod
    def parse(cls, uri: str) -> "PeerURI":
        """
        Parse a pubkey@host:port node URI.

        Args:
            uri: Node URI announced by the server

        Returns:
            PeerURI instance

        Raises:
            ProtocolError: If the URI is malformed
        """
        parts = uri.strip().split("@")
        if len(parts) != 2:
            raise ProtocolError(f"Invalid node URI: {uri}")

        pubkey, address = parts
        if not _PUBKEY_RE.match(pubkey):
            raise ProtocolError(f"Invalid node public key in URI: {uri}")

        host, sep, port_text = address.rpartition(":")
        if not sep or not host or not port_text.isdigit():
            raise ProtocolError(f"Invalid node address in URI: {uri}")

        port = int(port_text)
        if not 1 <= port <= 65535:
            raise ProtocolError(f"Invalid node port in URI: {uri}")

        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
            try:
                ipaddress.IPv6Address(host)
            except ValueError:
                raise ProtocolError(f"Invalid IPv6 address in URI: {uri}")

        return cls(public_key=pubkey, host=host, port=port)

    def __str__(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.public_key}@{host}:{self.port}"


def raise_for_lnurl_error(payload: Any, what: str) -> None:
    """
    Raise if payload is an LNURL error response.

    LNURL servers may answer any request with
    ``{"status": "ERROR", "reason": "..."}`` instead of the expected body.

    Raises:
        ProtocolError: Carrying the server supplied reason
    """
    if not isinstance(payload, dict):
        return
    status = payload.get("status")
    if isinstance(status, str) and status.upper() == STATUS_ERROR:
        reason = payload.get("reason") or UNKNOWN_ERROR
        raise ProtocolError(f"Server rejected {what}: {reason}")


def parse_model(model: type, payload: Any, what: str):
    """
    Validate a decoded JSON payload against a model.

    Args:
        model: Model class to validate against
        payload: Decoded JSON
        what: Human readable name of the response for error messages

    Returns:
        Model instance

    Raises:
        ProtocolError: If the payload does not match the model
    """
    if not isinstance(payload, dict):
        raise ProtocolError(f"Invalid {what}: expected a JSON object")

    try:
        return model.model_validate(payload)
    except ValueError as e:
        raise ProtocolError(f"Invalid {what}: {e}")
