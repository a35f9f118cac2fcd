"""
Pytest fixtures. Registry tests use pytest-django's test database; connector
tests talk to a fake registry through httpx.MockTransport.
"""

from __future__ import annotations

import httpx
import pytest

from connector.adapters.registry_adapter import RegistryAdapter
from connector.provider_stub import StubProvider
from connector.storage import MemoryStorage
from connector.wallet_connector import WalletConnector

ADDRESS = "0xABCDEF0000000000000000000000000000000001"
OTHER_ADDRESS = "0x1234567890abcdef1234567890abcdef12345678"
REGISTRY_URL = "http://registry.test/api/wallet"


class FakeRegistry:
    """MockTransport handler that answers like the registry and records requests."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status = 201
        self.body = {"success": True, "message": "Wallet connected successfully"}
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status, json=self.body)


@pytest.fixture
def fake_registry():
    return FakeRegistry()


@pytest.fixture
def registry(fake_registry):
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_registry))
    return RegistryAdapter(REGISTRY_URL, client=client)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def provider():
    return StubProvider([ADDRESS], chain_id="0x1")


@pytest.fixture
def connector(provider, registry, storage):
    return WalletConnector(provider, registry=registry, storage=storage)
