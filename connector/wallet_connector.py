"""Client-side wallet connection flow.

Connect → take the first authorized account → resolve the network label →
report (address, network) to the registry in a detached task. The provider is
the source of truth for the session; a failed report is logged and never
touches session state.

All methods run on one asyncio loop. Concurrent connect_wallet() calls are
not serialized: whichever finishes last wins the session state.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable

from . import config
from .adapters.registry_adapter import RegistryAdapter
from .networks import UNKNOWN_NETWORK, network_label
from .provider import ACCOUNTS_CHANGED, CHAIN_CHANGED, WalletProvider
from .storage import MemoryStorage
from .view import ACCOUNT, CONNECT, INSTALL, ConnectorView, format_address

logger = logging.getLogger(__name__)

NOT_INSTALLED_ERROR = "MetaMask is not installed. Please install MetaMask extension."
CONNECT_FAILED_ERROR = "Failed to connect to MetaMask. Please try again."


@dataclass
class SessionState:
	account: str = ""
	is_connected: bool = False
	network_name: str = UNKNOWN_NETWORK
	error: str = ""


class WalletConnector:
	"""
	provider is None when the browser has no injected wallet.

	reload_page is called on a network change; by default it simulates a page
	reload: session state is dropped and the silent reconnect runs again.

	Use as an async context manager to get provider event subscriptions for
	exactly the lifetime of the block:

		async with WalletConnector(provider, registry=registry) as wallet:
			await wallet.connect_wallet()

	Leaving the block waits for reports still in flight and closes the
	registry client if the connector created it. Provider events may be
	emitted from other threads; follow-up work is handed to the loop that
	ran start().
	"""

	def __init__(
		self,
		provider: WalletProvider | None,
		*,
		registry: RegistryAdapter | None = None,
		storage=None,
		reload_page: Callable[[], None] | None = None,
	):
		self.provider = provider
		self._owns_registry = registry is None
		self.registry = registry or RegistryAdapter()
		self.storage = storage if storage is not None else MemoryStorage()
		self.reload_page = reload_page or self._reload
		self.state = SessionState()
		self._subscribed = False
		self._tasks: set[asyncio.Task] = set()
		self._loop: asyncio.AbstractEventLoop | None = None

	def is_provider_available(self) -> bool:
		return self.provider is not None

	# --- Lifecycle ---------------------------------------------------------------

	async def start(self) -> None:
		self._loop = asyncio.get_running_loop()
		await self.restore_session()
		self._subscribe()

	def stop(self) -> None:
		self._unsubscribe()

	async def __aenter__(self):
		await self.start()
		return self

	async def __aexit__(self, *exc):
		self.stop()
		await self.drain()
		if self._owns_registry:
			await self.registry.aclose()

	def _subscribe(self) -> None:
		if not self.is_provider_available():
			return
		# Never stack a second pair of handlers on the provider
		self._unsubscribe()
		self.provider.on(ACCOUNTS_CHANGED, self.handle_accounts_changed)
		self.provider.on(CHAIN_CHANGED, self.handle_chain_changed)
		self._subscribed = True

	def _unsubscribe(self) -> None:
		if not self._subscribed:
			return
		self.provider.remove_listener(ACCOUNTS_CHANGED, self.handle_accounts_changed)
		self.provider.remove_listener(CHAIN_CHANGED, self.handle_chain_changed)
		self._subscribed = False

	# --- Operations --------------------------------------------------------------

	async def connect_wallet(self) -> None:
		"""
		User clicked "Connect". Errors end up in state.error, never raised.
		"""
		self.state.error = ""

		if not self.is_provider_available():
			self.state.error = NOT_INSTALLED_ERROR
			return

		try:
			accounts = await self.provider.request_accounts()
		except Exception:
			logger.exception("Error connecting to wallet provider")
			self.state.error = CONNECT_FAILED_ERROR
			return

		if not accounts:
			return

		self.storage.set_item(config.CONNECTED_FLAG_KEY, "true")
		await self._activate(accounts[0])

	def disconnect_wallet(self) -> None:
		"""
		Forget the session locally. The registry keeps its record.
		"""
		self.state.account = ""
		self.state.is_connected = False
		self.state.error = ""
		self.storage.remove_item(config.CONNECTED_FLAG_KEY)

	async def restore_session(self) -> None:
		"""
		Silent reconnect on load: only when this tab connected before, and
		without prompting the user.
		"""
		if not self.storage.get_item(config.CONNECTED_FLAG_KEY) or not self.is_provider_available():
			return
		try:
			accounts = await self.provider.get_authorized_accounts()
		except Exception:
			logger.exception("Could not read authorized accounts")
			return
		if accounts:
			await self._activate(accounts[0])

	async def get_network_name(self) -> str:
		if not self.is_provider_available():
			return UNKNOWN_NETWORK
		try:
			network = network_label(await self.provider.get_chain_id())
		except Exception:
			logger.warning("Could not resolve chain id", exc_info=True)
			network = UNKNOWN_NETWORK
		self.state.network_name = network
		return network

	async def _activate(self, address: str) -> None:
		self.state.account = address
		self.state.is_connected = True
		network = await self.get_network_name()
		self._spawn(self._report(address, network))

	# --- Provider events ---------------------------------------------------------

	def handle_accounts_changed(self, accounts) -> None:
		if not accounts:
			# User locked the wallet or revoked this site
			self.disconnect_wallet()
		elif accounts[0] != self.state.account:
			self.state.account = accounts[0]

	def handle_chain_changed(self, chain_id=None) -> None:
		self.reload_page()

	def _reload(self) -> None:
		self.state = SessionState()
		self._spawn(self.restore_session())

	# --- Registry report ---------------------------------------------------------

	def _spawn(self, coro) -> None:
		try:
			asyncio.get_running_loop()
		except RuntimeError:
			# Provider emitted from another thread: hop onto the loop start() ran on
			if self._loop is None:
				coro.close()
				raise
			self._loop.call_soon_threadsafe(self._spawn, coro)
			return
		task = asyncio.create_task(coro)
		self._tasks.add(task)
		task.add_done_callback(self._tasks.discard)

	async def _report(self, address: str, network: str) -> None:
		"""
		At-most-once, best-effort: failures are logged and dropped
		"""
		try:
			data = await self.registry.connect(address, network)
			if data.get("success"):
				logger.info("Wallet saved to registry: %s", data.get("message"))
			else:
				logger.error("Failed to save wallet to registry: %s", data.get("error"))
		except Exception:
			logger.exception("Registry API error for %s", address)

	async def drain(self) -> None:
		"""
		Wait for reports (and reload reconnects) still in flight.
		"""
		while self._tasks:
			await asyncio.gather(*list(self._tasks), return_exceptions=True)

	# --- Presentation ------------------------------------------------------------

	def render(self) -> ConnectorView:
		if not self.is_provider_available():
			return ConnectorView(
				kind=INSTALL,
				title="MetaMask Not Found",
				message="Please install MetaMask extension to use this app.",
				install_url=config.INSTALL_URL,
			)
		if not self.state.is_connected:
			return ConnectorView(
				kind=CONNECT,
				title="MetaMask Connection",
				message="Connect your MetaMask wallet to get started",
				error=self.state.error,
			)
		return ConnectorView(
			kind=ACCOUNT,
			title="Connected Account",
			error=self.state.error,
			account_display=format_address(self.state.account),
			network_name=self.state.network_name,
			clipboard_text=self.state.account,
		)
