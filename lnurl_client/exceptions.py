"""Exceptions raised by the LNURL client."""


class LNURLClientError(Exception):
    """Base exception for LNURL client errors."""
    pass


class InvalidAddress(LNURLClientError):
    """Raised when a server address is neither a URL nor host[:port]."""
    pass


class ValidationError(LNURLClientError):
    """Raised when a value violates a declared precondition."""
    pass


class NetworkError(LNURLClientError):
    """Raised when an HTTP call could not complete."""
    
    def __init__(self, message: str, host: str = "", port: int = 0):
        super().__init__(message)
        self.host = host
        self.port = port


class ProtocolError(LNURLClientError):
    """Raised when a reachable server answers outside the expected protocol."""
    
    def __init__(self, message: str, status_code: int = 0, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NodeError(LNURLClientError):
    """Raised when the local Lightning node fails or answers unexpectedly."""
    pass
