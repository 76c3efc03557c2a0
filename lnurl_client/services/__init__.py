"""Service layer for the LNURL channel, withdraw and auth flows."""

from .auth import AuthService, AuthState
from .channel import ChannelRequestService, ChannelState
from .withdraw import WithdrawService, WithdrawState

__all__ = [
    "AuthService",
    "AuthState",
    "ChannelRequestService",
    "ChannelState",
    "WithdrawService",
    "WithdrawState",
]
