"""Adapter over the wallet registry HTTP API.

Responses are returned as the registry's JSON envelope
({"success": ..., "data": ..., "error": ...}) whatever the status code;
transport failures (connection refused, timeouts, non-JSON bodies) raise.
"""

from urllib.parse import quote

import httpx

from .. import config


class RegistryAdapter:
	"""
	Thin async client; one httpx.AsyncClient per adapter.
	Pass client= to share a pool or to inject a mock transport in tests.
	"""

	def __init__(self, base_url: str | None = None, *, client: httpx.AsyncClient | None = None, timeout: float | None = None):
		self.base_url = (base_url or config.REGISTRY_URL).rstrip("/")
		self._client = client or httpx.AsyncClient(timeout=timeout or config.REGISTRY_TIMEOUT)

	async def connect(self, address: str, network: str) -> dict:
		"""
		Record a connection; the registry answers 201 on first sight, 200 on reconnect.
		"""
		resp = await self._client.post(f"{self.base_url}/connect", json={"address": address, "network": network})
		return resp.json()

	async def list_addresses(self) -> dict:
		resp = await self._client.get(f"{self.base_url}/addresses")
		return resp.json()

	async def get_address(self, address: str) -> dict:
		resp = await self._client.get(f"{self.base_url}/address/{quote(address, safe='')}")
		return resp.json()

	async def deactivate(self, address: str) -> dict:
		resp = await self._client.delete(f"{self.base_url}/address/{quote(address, safe='')}")
		return resp.json()

	async def aclose(self) -> None:
		await self._client.aclose()

	async def __aenter__(self):
		return self

	async def __aexit__(self, *exc):
		await self.aclose()
