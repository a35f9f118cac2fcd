"""Deterministic in-process wallet provider.

Holds a fixed list of accounts and a chain id. Used to simulate prompts
(approve / reject), account switches and network changes without a browser.
"""

from collections import defaultdict

from .provider import ACCOUNTS_CHANGED, CHAIN_CHANGED, Handler, ProviderError, WalletProvider


class StubProvider(WalletProvider):
	"""
	Approves every prompt unless reject_prompts is set. authorized flips to True
	once a prompt was approved (or when constructed pre-authorized).
	"""

	def __init__(self, accounts=None, chain_id: str = "0x1", *, authorized: bool = False, reject_prompts: bool = False):
		self.accounts = list(accounts or [])
		self.chain_id = chain_id
		self.authorized = authorized
		self.reject_prompts = reject_prompts
		self.chain_error: Exception | None = None
		self.calls: list[str] = []
		self._listeners: dict[str, list[Handler]] = defaultdict(list)

	async def request_accounts(self) -> list[str]:
		self.calls.append("eth_requestAccounts")
		if self.reject_prompts:
			raise ProviderError("User rejected the request.")
		self.authorized = True
		return list(self.accounts)

	async def get_chain_id(self) -> str:
		self.calls.append("eth_chainId")
		if self.chain_error is not None:
			raise self.chain_error
		return self.chain_id

	async def get_authorized_accounts(self) -> list[str]:
		self.calls.append("eth_accounts")
		return list(self.accounts) if self.authorized else []

	def on(self, event: str, handler: Handler) -> None:
		self._listeners[event].append(handler)

	def remove_listener(self, event: str, handler: Handler) -> None:
		if handler in self._listeners[event]:
			self._listeners[event].remove(handler)

	def listener_count(self, event: str) -> int:
		return len(self._listeners[event])

	# --- Simulation helpers ------------------------------------------------------

	def emit(self, event: str, payload) -> None:
		for handler in list(self._listeners[event]):
			handler(payload)

	def switch_accounts(self, accounts) -> None:
		"""
		User picked other accounts (or locked the wallet when accounts is empty)
		"""
		self.accounts = list(accounts)
		self.emit(ACCOUNTS_CHANGED, list(self.accounts))

	def switch_chain(self, chain_id: str) -> None:
		self.chain_id = chain_id
		self.emit(CHAIN_CHANGED, chain_id)
