"""Browser-side wallet connector, driven by an injected provider."""

from .provider import ProviderError, WalletProvider
from .view import format_address
from .wallet_connector import SessionState, WalletConnector

__all__ = ["ProviderError", "WalletProvider", "SessionState", "WalletConnector", "format_address"]
