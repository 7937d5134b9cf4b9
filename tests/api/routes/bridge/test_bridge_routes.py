"""Testes dos endpoints da ponte (status, qr, init, send, logout, logs)."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from types import SimpleNamespace

import pytest
import pytest_asyncio
from fastapi.responses import JSONResponse
from starlette.requests import Request

from api.routes.bridge.router import (
    get_logs,
    get_qr,
    get_status,
    init_session,
    logout,
    send_message,
)
from api.routes.bridge.schemas import SendMessageRequest, SendMessageResponse
from app.sessions.events import Authenticated, PairingCodeIssued, Ready
from app.sessions.manager import SessionManager
from config.settings.bridge import BridgeSettings
from fsm import BridgeState
from tests.fakes.fake_messaging_client import FakeMessagingClient


def _build_request(manager: SessionManager, method: str = "GET", path: str = "/") -> Request:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "path": path,
        "raw_path": path.encode(),
        "query_string": b"",
        "headers": [],
        "app": SimpleNamespace(state=SimpleNamespace(session_manager=manager)),
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(scope, _receive)


@pytest.fixture
def client() -> FakeMessagingClient:
    return FakeMessagingClient()


@pytest_asyncio.fixture
async def manager(client: FakeMessagingClient) -> AsyncIterator[SessionManager]:
    bridge = SessionManager(
        client=client,
        settings=BridgeSettings(send_timeout_seconds=0.1, logout_timeout_seconds=0.1),
    )
    yield bridge
    await bridge.aclose()


async def _to_ready(manager: SessionManager, client: FakeMessagingClient) -> None:
    await manager.start()
    await asyncio.sleep(0)
    for event in (PairingCodeIssued(code="2@abc"), Authenticated(), Ready(account_label="Loja")):
        client.emit(event)
    await manager.drain()


def _json(response: JSONResponse) -> dict[str, object]:
    return json.loads(response.body.decode("utf-8"))


class TestStatusAndLogs:
    """Leituras para polling do operador."""

    @pytest.mark.asyncio
    async def test_status_when_disconnected(self, manager: SessionManager) -> None:
        payload = await get_status(_build_request(manager, path="/status"))

        assert payload["state"] == "DISCONNECTED"
        assert payload["connected"] is False
        assert payload["logs"] == []
        assert "timestamp" in payload

    @pytest.mark.asyncio
    async def test_status_includes_recent_events(
        self,
        manager: SessionManager,
        client: FakeMessagingClient,
    ) -> None:
        await _to_ready(manager, client)

        payload = await get_status(_build_request(manager, path="/status"))

        assert payload["connected"] is True
        assert payload["account"] == "Loja"
        assert payload["logs"][0]["message"] == "WhatsApp client is ready"
        assert len(payload["logs"]) <= 5

    @pytest.mark.asyncio
    async def test_logs_newest_first(
        self,
        manager: SessionManager,
        client: FakeMessagingClient,
    ) -> None:
        await _to_ready(manager, client)

        entries = await get_logs(_build_request(manager, path="/logs"))

        assert [e["type"] for e in entries] == ["SUCCESS", "INFO", "INFO", "INFO"]
        assert entries[-1]["message"] == "Initialization requested"


class TestQrAndInit:
    """Pareamento sob demanda."""

    @pytest.mark.asyncio
    async def test_qr_starts_session_lazily(
        self,
        manager: SessionManager,
        client: FakeMessagingClient,
    ) -> None:
        payload = await get_qr(_build_request(manager, path="/qr"))

        assert payload == {"state": "INITIALIZING", "code": None}
        await asyncio.sleep(0)
        assert client.calls == ["begin_pairing"]

    @pytest.mark.asyncio
    async def test_qr_returns_pending_code(
        self,
        manager: SessionManager,
        client: FakeMessagingClient,
    ) -> None:
        await manager.start()
        client.emit(PairingCodeIssued(code="2@abc"))
        await manager.drain()

        payload = await get_qr(_build_request(manager, path="/qr"))

        assert payload["state"] == "AWAITING_PAIRING"
        assert payload["raw_code"] == "2@abc"

    @pytest.mark.asyncio
    async def test_qr_when_ready(self, manager: SessionManager, client: FakeMessagingClient) -> None:
        await _to_ready(manager, client)
        assert await get_qr(_build_request(manager, path="/qr")) == {"state": "READY"}

    @pytest.mark.asyncio
    async def test_init_is_idempotent(self, manager: SessionManager) -> None:
        request = _build_request(manager, method="POST", path="/init")

        first = await init_session(request)
        second = await init_session(request)

        assert first.message == "Initialization requested"
        assert first.state == "INITIALIZING"
        assert second.state == "INITIALIZING"


class TestSend:
    """POST /send e mapeamento de erros."""

    @pytest.mark.asyncio
    async def test_send_success(self, manager: SessionManager, client: FakeMessagingClient) -> None:
        await _to_ready(manager, client)

        response = await send_message(
            SendMessageRequest(phone="0771234567", message="olá"),
            _build_request(manager, method="POST", path="/send"),
        )

        assert isinstance(response, SendMessageResponse)
        assert response.success is True
        assert response.id == "msg-1"
        assert client.sent == [("9641234567@c.us", "olá")]

    @pytest.mark.asyncio
    async def test_send_when_not_connected_returns_503(self, manager: SessionManager) -> None:
        response = await send_message(
            SendMessageRequest(phone="0771234567", message="olá"),
            _build_request(manager, method="POST", path="/send"),
        )

        assert isinstance(response, JSONResponse)
        assert response.status_code == 503
        assert _json(response) == {
            "success": False,
            "error": "WhatsApp not connected",
            "code": "NOT_CONNECTED",
        }

    @pytest.mark.asyncio
    async def test_send_with_missing_fields_returns_400(
        self,
        manager: SessionManager,
        client: FakeMessagingClient,
    ) -> None:
        await _to_ready(manager, client)

        response = await send_message(
            SendMessageRequest(phone="0771234567"),
            _build_request(manager, method="POST", path="/send"),
        )

        assert response.status_code == 400
        assert _json(response)["error"] == "Phone and message are required"

    @pytest.mark.asyncio
    async def test_send_failure_returns_500_with_details(
        self,
        manager: SessionManager,
        client: FakeMessagingClient,
    ) -> None:
        await _to_ready(manager, client)
        client.send_error = RuntimeError("number not registered")

        response = await send_message(
            SendMessageRequest(phone="0771234567", message="olá"),
            _build_request(manager, method="POST", path="/send"),
        )

        payload = _json(response)
        assert response.status_code == 500
        assert payload["code"] == "DELIVERY_FAILED"
        assert payload["details"] == "number not registered"


class TestLogout:
    """POST /logout."""

    @pytest.mark.asyncio
    async def test_logout_always_ends_disconnected(
        self,
        manager: SessionManager,
        client: FakeMessagingClient,
    ) -> None:
        await _to_ready(manager, client)
        client.logout_error = RuntimeError("browser gone")

        response = await logout(_build_request(manager, method="POST", path="/logout"))

        assert response.message == "Logged out successfully"
        assert response.state == "DISCONNECTED"
        assert manager.state == BridgeState.DISCONNECTED
