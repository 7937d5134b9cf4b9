"""Testes do supervisor de reconexão."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from app.sessions.events import (
    Authenticated,
    AuthFailed,
    Disconnected,
    PairingCodeIssued,
    Ready,
)
from app.sessions.manager import SessionManager
from app.sessions.supervisor import ReconnectSupervisor
from config.settings.bridge import BridgeSettings
from fsm import BridgeState
from tests.fakes.fake_messaging_client import FakeMessagingClient


def _settings(**overrides: object) -> BridgeSettings:
    values: dict[str, object] = {
        "reconnect_policy": "on_disconnect",
        "reconnect_delay_seconds": 0.0,
        "reconnect_max_attempts": 2,
        "logout_timeout_seconds": 0.1,
    }
    values.update(overrides)
    return BridgeSettings(**values)  # type: ignore[arg-type]


@pytest.fixture
def client() -> FakeMessagingClient:
    return FakeMessagingClient()


@pytest_asyncio.fixture
async def bridge(
    client: FakeMessagingClient,
) -> AsyncIterator[tuple[SessionManager, ReconnectSupervisor]]:
    settings = _settings()
    manager = SessionManager(client=client, settings=settings)
    supervisor = ReconnectSupervisor(manager, settings)
    yield manager, supervisor
    await supervisor.aclose()
    await manager.aclose()


async def _settle(manager: SessionManager) -> None:
    """Deixa tasks de fundo (reconexão, begin_pairing) rodarem."""
    for _ in range(3):
        await asyncio.sleep(0.01)
        await manager.drain()


async def _to_ready(manager: SessionManager, client: FakeMessagingClient) -> None:
    await manager.start()
    await _settle(manager)
    for event in (PairingCodeIssued(code="2@abc"), Authenticated(), Ready()):
        client.emit(event)
    await manager.drain()


class TestReconnectSupervisor:
    """Política on_disconnect."""

    @pytest.mark.asyncio
    async def test_unexpected_disconnect_triggers_restart(
        self,
        bridge: tuple[SessionManager, ReconnectSupervisor],
        client: FakeMessagingClient,
    ) -> None:
        manager, supervisor = bridge
        await _to_ready(manager, client)

        client.emit(Disconnected(reason="NAVIGATION"))
        await _settle(manager)

        assert manager.state == BridgeState.INITIALIZING
        assert client.calls.count("begin_pairing") == 2
        assert supervisor.attempts == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reason", ["LOGOUT", "LOGGED_OUT", "loggedOut"])
    async def test_logout_reason_does_not_reconnect(
        self,
        bridge: tuple[SessionManager, ReconnectSupervisor],
        client: FakeMessagingClient,
        reason: str,
    ) -> None:
        manager, supervisor = bridge
        await _to_ready(manager, client)

        client.emit(Disconnected(reason=reason))
        await _settle(manager)

        assert manager.state == BridgeState.DISCONNECTED
        assert supervisor.attempts == 0

    @pytest.mark.asyncio
    async def test_auth_failure_and_explicit_logout_do_not_reconnect(
        self,
        bridge: tuple[SessionManager, ReconnectSupervisor],
        client: FakeMessagingClient,
    ) -> None:
        manager, supervisor = bridge
        await manager.start()
        await _settle(manager)
        client.emit(AuthFailed(reason="bad"))
        await _settle(manager)
        assert manager.state == BridgeState.DISCONNECTED

        await _to_ready(manager, client)
        await manager.logout()
        await _settle(manager)

        assert manager.state == BridgeState.DISCONNECTED
        assert supervisor.attempts == 0
        assert supervisor.pending is False

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(
        self,
        bridge: tuple[SessionManager, ReconnectSupervisor],
        client: FakeMessagingClient,
    ) -> None:
        manager, supervisor = bridge
        await manager.start()
        await _settle(manager)

        for _ in range(3):
            client.emit(Disconnected(reason="CONFLICT"))
            await _settle(manager)

        assert supervisor.attempts == 2
        assert manager.state == BridgeState.DISCONNECTED
        assert client.calls.count("begin_pairing") == 3

    @pytest.mark.asyncio
    async def test_ready_resets_attempts(
        self,
        bridge: tuple[SessionManager, ReconnectSupervisor],
        client: FakeMessagingClient,
    ) -> None:
        manager, supervisor = bridge
        await _to_ready(manager, client)
        client.emit(Disconnected(reason="NAVIGATION"))
        await _settle(manager)
        assert supervisor.attempts == 1

        for event in (Authenticated(), Ready()):
            client.emit(event)
        await manager.drain()

        assert manager.state == BridgeState.READY
        assert supervisor.attempts == 0


class TestReconnectPolicy:
    """Política never e cancelamento."""

    @pytest.mark.asyncio
    async def test_policy_never_does_not_reconnect(self, client: FakeMessagingClient) -> None:
        settings = _settings(reconnect_policy="never")
        manager = SessionManager(client=client, settings=settings)
        supervisor = ReconnectSupervisor(manager, settings)
        try:
            await _to_ready(manager, client)
            client.emit(Disconnected(reason="NAVIGATION"))
            await _settle(manager)

            assert manager.state == BridgeState.DISCONNECTED
            assert supervisor.attempts == 0
        finally:
            await supervisor.aclose()
            await manager.aclose()

    @pytest.mark.asyncio
    async def test_aclose_cancels_pending_reconnect(self, client: FakeMessagingClient) -> None:
        settings = _settings(reconnect_delay_seconds=10.0)
        manager = SessionManager(client=client, settings=settings)
        supervisor = ReconnectSupervisor(manager, settings)
        try:
            await _to_ready(manager, client)
            client.emit(Disconnected(reason="NAVIGATION"))
            await manager.drain()
            assert supervisor.pending is True

            await supervisor.aclose()

            assert supervisor.pending is False
            assert client.calls.count("begin_pairing") == 1
        finally:
            await manager.aclose()
