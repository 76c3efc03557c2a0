"""LNURL addressing, wire models and HTTP transport."""

from .address import normalize_address
from .encoding import decode_lnurl
from .http import LNURLHttpClient

__all__ = ["normalize_address", "decode_lnurl", "LNURLHttpClient"]
