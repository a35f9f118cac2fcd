"""Capability surface of a browser-injected wallet provider.

The connector never reaches for a global; a provider (or None when the
browser has none) is handed to it, which lets tests swap in StubProvider.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable

ACCOUNTS_CHANGED = "accountsChanged"
CHAIN_CHANGED = "chainChanged"

Handler = Callable[[Any], None]


class ProviderError(Exception):
	"""The provider is missing, failed, or the user rejected its prompt."""


class WalletProvider(ABC):

	@abstractmethod
	async def request_accounts(self) -> list[str]:
		"""
		Ask the user to authorize accounts. May suspend until the user answers
		in the provider's own UI; raises ProviderError on rejection.
		"""

	@abstractmethod
	async def get_chain_id(self) -> str:
		"""Hex-encoded chain id, e.g. "0x1"."""

	@abstractmethod
	async def get_authorized_accounts(self) -> list[str]:
		"""Accounts already authorized for this site, without prompting."""

	@abstractmethod
	def on(self, event: str, handler: Handler) -> None:
		...

	@abstractmethod
	def remove_listener(self, event: str, handler: Handler) -> None:
		...
