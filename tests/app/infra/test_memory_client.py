"""Testes do cliente de mensagens em memória."""

from __future__ import annotations

import asyncio

import pytest

from app.infra.messaging import MemoryMessagingClient
from app.sessions.events import (
    Authenticated,
    AuthFailed,
    Disconnected,
    LifecycleEvent,
    PairingCodeIssued,
    Ready,
)
from app.sessions.manager import SessionManager
from config.settings.bridge import BridgeSettings
from fsm import BridgeState


@pytest.fixture
def events() -> list[LifecycleEvent]:
    return []


@pytest.fixture
def client(events: list[LifecycleEvent]) -> MemoryMessagingClient:
    memory = MemoryMessagingClient(account_label="Loja Centro")
    memory.subscribe(events.append)
    return memory


class TestMemoryMessagingClient:
    """Simulação do ciclo de vida."""

    @pytest.mark.asyncio
    async def test_begin_pairing_without_credentials_issues_code(
        self,
        client: MemoryMessagingClient,
        events: list[LifecycleEvent],
    ) -> None:
        await client.begin_pairing()

        assert len(events) == 1
        assert isinstance(events[0], PairingCodeIssued)
        assert events[0].code == client.current_code
        assert client.current_code.startswith("2@")

    @pytest.mark.asyncio
    async def test_rotate_code_replaces_previous(
        self,
        client: MemoryMessagingClient,
        events: list[LifecycleEvent],
    ) -> None:
        await client.begin_pairing()
        first = client.current_code
        second = client.rotate_code()

        assert second != first
        assert events[-1] == PairingCodeIssued(code=second)

    @pytest.mark.asyncio
    async def test_confirm_pairing_authenticates_and_stores_credentials(
        self,
        client: MemoryMessagingClient,
        events: list[LifecycleEvent],
    ) -> None:
        await client.begin_pairing()
        client.confirm_pairing()

        assert events[-2:] == [Authenticated(), Ready(account_label="Loja Centro")]
        assert client.connected is True
        assert client.has_stored_credentials is True
        assert client.current_code is None

    def test_confirm_without_pending_code_raises(self, client: MemoryMessagingClient) -> None:
        with pytest.raises(RuntimeError, match="no pairing code pending"):
            client.confirm_pairing()

    @pytest.mark.asyncio
    async def test_stored_credentials_skip_code_on_next_start(
        self,
        client: MemoryMessagingClient,
        events: list[LifecycleEvent],
    ) -> None:
        await client.begin_pairing()
        client.confirm_pairing()
        client.drop_connection()
        events.clear()

        await client.begin_pairing()

        assert events == [Authenticated(), Ready(account_label="Loja Centro")]

    @pytest.mark.asyncio
    async def test_logout_discards_credentials(
        self,
        client: MemoryMessagingClient,
        events: list[LifecycleEvent],
    ) -> None:
        await client.begin_pairing()
        client.confirm_pairing()
        await client.logout()
        events.clear()

        await client.begin_pairing()

        assert client.has_stored_credentials is False
        assert isinstance(events[0], PairingCodeIssued)

    @pytest.mark.asyncio
    async def test_force_teardown_discards_credentials(
        self,
        client: MemoryMessagingClient,
        events: list[LifecycleEvent],
    ) -> None:
        await client.begin_pairing()
        client.confirm_pairing()
        await client.force_teardown()
        events.clear()

        await client.begin_pairing()

        assert client.has_stored_credentials is False
        assert client.connected is False
        assert len(events) == 1
        assert isinstance(events[0], PairingCodeIssued)

    @pytest.mark.asyncio
    async def test_send_requires_connection(self, client: MemoryMessagingClient) -> None:
        with pytest.raises(RuntimeError, match="not connected"):
            await client.send_text("964771234567@c.us", "olá")

        await client.begin_pairing()
        client.confirm_pairing()
        receipt = await client.send_text("964771234567@c.us", "olá")

        assert receipt.recipient == "964771234567@c.us"
        assert receipt.message_id.startswith("true_964771234567@c.us_")
        assert client.sent[0].body == "olá"

    @pytest.mark.asyncio
    async def test_drop_and_reject_emit_failure_events(
        self,
        client: MemoryMessagingClient,
        events: list[LifecycleEvent],
    ) -> None:
        await client.begin_pairing()
        client.confirm_pairing()

        client.drop_connection()
        assert events[-1] == Disconnected(reason="NAVIGATION")
        assert client.connected is False

        client.reject_credentials("invalid session")
        assert events[-1] == AuthFailed(reason="invalid session")
        assert client.has_stored_credentials is False


class TestMemoryClientWithSessionManager:
    """Fluxo completo da ponte sobre o cliente em memória."""

    @pytest.mark.asyncio
    async def test_full_pairing_send_and_logout(self) -> None:
        client = MemoryMessagingClient()
        manager = SessionManager(client=client, settings=BridgeSettings())
        try:
            await manager.start()
            # begin_pairing roda em task de fundo
            await asyncio.sleep(0.01)
            await manager.drain()
            assert manager.state == BridgeState.AWAITING_PAIRING

            assert manager.get_pairing_info().raw_code == client.current_code

            client.confirm_pairing()
            await manager.drain()
            assert manager.state == BridgeState.READY
            assert manager.describe().account_label == "memory-device"

            receipt = await manager.send("0771234567", "olá")
            assert receipt.recipient == "9641234567@c.us"

            await manager.logout()
            assert manager.state == BridgeState.DISCONNECTED
            assert client.has_stored_credentials is False
        finally:
            await manager.aclose()
