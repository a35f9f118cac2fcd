"""
Wallet connector flow against StubProvider and a fake registry.
"""

from __future__ import annotations

import asyncio
import json
import logging
import threading

import httpx
import pytest

from connector import config
from connector.adapters.registry_adapter import RegistryAdapter
from connector.provider_stub import StubProvider
from connector.view import ACCOUNT, CONNECT, INSTALL
from connector.wallet_connector import CONNECT_FAILED_ERROR, NOT_INSTALLED_ERROR, WalletConnector

from conftest import ADDRESS, OTHER_ADDRESS, REGISTRY_URL


def _bodies(fake_registry):
    return [json.loads(r.content) for r in fake_registry.requests]


@pytest.mark.asyncio
async def test_no_provider_renders_install_prompt_and_makes_no_calls(registry, fake_registry, storage):
    wallet = WalletConnector(None, registry=registry, storage=storage)
    assert wallet.is_provider_available() is False
    assert wallet.render().kind == INSTALL
    assert wallet.render().install_url == config.INSTALL_URL

    await wallet.connect_wallet()
    await wallet.drain()

    assert wallet.state.error == NOT_INSTALLED_ERROR
    assert wallet.state.is_connected is False
    assert fake_registry.requests == []


@pytest.mark.asyncio
async def test_connect_sets_session_and_reports(connector, fake_registry, storage):
    await connector.connect_wallet()

    assert connector.state.account == ADDRESS
    assert connector.state.is_connected is True
    assert connector.state.network_name == "Ethereum Mainnet"
    assert connector.state.error == ""
    assert storage.get_item(config.CONNECTED_FLAG_KEY) == "true"

    await connector.drain()
    assert len(fake_registry.requests) == 1
    request = fake_registry.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "http://registry.test/api/wallet/connect"
    assert _bodies(fake_registry) == [{"address": ADDRESS, "network": "Ethereum Mainnet"}]


@pytest.mark.asyncio
async def test_rejected_prompt_sets_error_and_keeps_state(connector, provider, fake_registry, storage):
    provider.reject_prompts = True
    await connector.connect_wallet()
    await connector.drain()

    assert connector.state.error == CONNECT_FAILED_ERROR
    assert connector.state.is_connected is False
    assert storage.get_item(config.CONNECTED_FLAG_KEY) is None
    assert fake_registry.requests == []


@pytest.mark.asyncio
async def test_retry_after_rejection_clears_error(connector, provider):
    provider.reject_prompts = True
    await connector.connect_wallet()
    provider.reject_prompts = False
    await connector.connect_wallet()
    await connector.drain()
    assert connector.state.error == ""
    assert connector.state.is_connected is True


@pytest.mark.asyncio
async def test_empty_account_list_changes_nothing(registry, fake_registry, storage):
    wallet = WalletConnector(StubProvider([]), registry=registry, storage=storage)
    await wallet.connect_wallet()
    await wallet.drain()
    assert wallet.state.is_connected is False
    assert wallet.state.error == ""
    assert fake_registry.requests == []


@pytest.mark.asyncio
async def test_report_failure_is_only_logged(connector, fake_registry, caplog):
    fake_registry.error = httpx.ConnectError("connection refused")
    with caplog.at_level(logging.ERROR, logger="connector.wallet_connector"):
        await connector.connect_wallet()
        await connector.drain()

    assert connector.state.is_connected is True
    assert connector.state.error == ""
    assert "Registry API error" in caplog.text


@pytest.mark.asyncio
async def test_registry_rejection_is_only_logged(connector, fake_registry, caplog):
    fake_registry.status = 400
    fake_registry.body = {"success": False, "error": "Invalid Ethereum address format"}
    with caplog.at_level(logging.ERROR, logger="connector.wallet_connector"):
        await connector.connect_wallet()
        await connector.drain()

    assert connector.state.is_connected is True
    assert "Invalid Ethereum address format" in caplog.text


@pytest.mark.asyncio
async def test_disconnect_clears_state_and_flag_without_registry_call(connector, fake_registry, storage):
    await connector.connect_wallet()
    await connector.drain()
    connector.disconnect_wallet()

    assert connector.state.account == ""
    assert connector.state.is_connected is False
    assert storage.get_item(config.CONNECTED_FLAG_KEY) is None
    assert len(fake_registry.requests) == 1
    assert connector.render().kind == CONNECT


@pytest.mark.asyncio
async def test_empty_accounts_changed_event_disconnects(connector, provider, storage):
    async with connector:
        await connector.connect_wallet()
        await connector.drain()
        provider.switch_accounts([])

    assert connector.state.is_connected is False
    assert connector.state.account == ""
    assert storage.get_item(config.CONNECTED_FLAG_KEY) is None


@pytest.mark.asyncio
async def test_account_switch_updates_address_only(connector, provider, fake_registry):
    async with connector:
        await connector.connect_wallet()
        await connector.drain()
        provider.switch_accounts([OTHER_ADDRESS, ADDRESS])
        await connector.drain()

    assert connector.state.account == OTHER_ADDRESS
    assert connector.state.is_connected is True
    assert len(fake_registry.requests) == 1


@pytest.mark.asyncio
async def test_chain_change_reloads_page(provider, registry, storage):
    reloads = []
    wallet = WalletConnector(provider, registry=registry, storage=storage, reload_page=lambda: reloads.append(1))
    async with wallet:
        provider.switch_chain("0x89")
    assert reloads == [1]


@pytest.mark.asyncio
async def test_default_reload_reconnects_silently_on_new_network(connector, provider, fake_registry):
    async with connector:
        await connector.connect_wallet()
        provider.switch_chain("0x89")
        await connector.drain()

    assert connector.state.is_connected is True
    assert connector.state.network_name == "Polygon Mainnet"
    assert provider.calls.count("eth_requestAccounts") == 1
    assert _bodies(fake_registry)[-1] == {"address": ADDRESS, "network": "Polygon Mainnet"}


@pytest.mark.asyncio
async def test_silent_reconnect_on_start(registry, fake_registry, storage):
    storage.set_item(config.CONNECTED_FLAG_KEY, "true")
    provider = StubProvider([ADDRESS], chain_id="0xa4b1", authorized=True)
    wallet = WalletConnector(provider, registry=registry, storage=storage)

    async with wallet:
        await wallet.drain()

    assert wallet.state.is_connected is True
    assert wallet.state.network_name == "Arbitrum One"
    assert "eth_requestAccounts" not in provider.calls
    assert _bodies(fake_registry) == [{"address": ADDRESS, "network": "Arbitrum One"}]


@pytest.mark.asyncio
async def test_no_silent_reconnect_without_flag(registry, fake_registry, storage):
    provider = StubProvider([ADDRESS], authorized=True)
    wallet = WalletConnector(provider, registry=registry, storage=storage)
    async with wallet:
        await wallet.drain()
    assert wallet.state.is_connected is False
    assert provider.calls == []
    assert fake_registry.requests == []


@pytest.mark.asyncio
async def test_subscriptions_live_for_the_block_only(connector, provider):
    async with connector:
        # starting again must not stack a second pair of handlers
        await connector.start()
        assert provider.listener_count("accountsChanged") == 1
        assert provider.listener_count("chainChanged") == 1
    assert provider.listener_count("accountsChanged") == 0
    assert provider.listener_count("chainChanged") == 0


@pytest.mark.asyncio
async def test_network_name_for_unlisted_chain_and_failures(connector, provider):
    provider.chain_id = "0x2105"
    assert await connector.get_network_name() == "Chain ID: 8453"

    provider.chain_error = RuntimeError("provider disconnected")
    assert await connector.get_network_name() == "Unknown"
    assert connector.state.network_name == "Unknown"


@pytest.mark.asyncio
async def test_account_view(connector):
    await connector.connect_wallet()
    await connector.drain()
    view = connector.render()
    assert view.kind == ACCOUNT
    assert view.account_display == "0xABCD...0001"
    assert view.network_name == "Ethereum Mainnet"
    assert view.clipboard_text == ADDRESS


@pytest.mark.asyncio
async def test_exit_waits_for_reports_and_closes_own_client(storage, fake_registry, monkeypatch):
    transport = httpx.MockTransport(fake_registry)
    monkeypatch.setattr(
        "connector.wallet_connector.RegistryAdapter",
        lambda: RegistryAdapter(REGISTRY_URL, client=httpx.AsyncClient(transport=transport)),
    )
    wallet = WalletConnector(StubProvider([ADDRESS]), storage=storage)

    async with wallet:
        await wallet.connect_wallet()

    assert not wallet._tasks
    assert len(fake_registry.requests) == 1
    assert wallet.registry._client.is_closed


@pytest.mark.asyncio
async def test_exit_leaves_injected_registry_open(connector, registry, fake_registry):
    async with connector:
        await connector.connect_wallet()

    assert len(fake_registry.requests) == 1
    assert registry._client.is_closed is False


@pytest.mark.asyncio
async def test_chain_change_emitted_from_another_thread(connector, provider, fake_registry):
    async with connector:
        await connector.connect_wallet()
        await connector.drain()

        emitter = threading.Thread(target=provider.switch_chain, args=("0x89",))
        emitter.start()
        emitter.join()
        # let the loop pick up the handed-over reconnect
        await asyncio.sleep(0)
        await connector.drain()

    assert connector.state.is_connected is True
    assert connector.state.network_name == "Polygon Mainnet"
    assert _bodies(fake_registry)[-1] == {"address": ADDRESS, "network": "Polygon Mainnet"}
