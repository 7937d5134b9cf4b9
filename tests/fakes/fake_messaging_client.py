"""Fake de cliente de mensagens para testes deterministas."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from app.protocols.messaging_client import DeliveryReceipt

if TYPE_CHECKING:
    from app.sessions.events import ClientEvent, EventSink


class FakeMessagingClient:
    """Implementa MessagingClientProtocol sem IO.

    Registra cada chamada e permite injetar falhas e atrasos. Eventos
    só são emitidos quando o teste chama `emit`, para que a sequência
    seja controlada pelo próprio teste.
    """

    def __init__(self) -> None:
        self.sink: EventSink | None = None
        self.calls: list[str] = []
        self.sent: list[tuple[str, str]] = []
        self.begin_error: Exception | None = None
        self.send_error: Exception | None = None
        # Endereços que falham mesmo com send_error vazio
        self.failing_addresses: set[str] = set()
        self.logout_error: Exception | None = None
        self.send_delay: float = 0.0
        self.logout_delay: float = 0.0

    def subscribe(self, sink: EventSink) -> None:
        self.sink = sink

    async def begin_pairing(self) -> None:
        self.calls.append("begin_pairing")
        if self.begin_error is not None:
            raise self.begin_error

    async def send_text(self, address: str, body: str) -> DeliveryReceipt:
        self.calls.append("send_text")
        if self.send_delay:
            await asyncio.sleep(self.send_delay)
        if self.send_error is not None:
            raise self.send_error
        if address in self.failing_addresses:
            raise RuntimeError(f"number not registered: {address}")
        self.sent.append((address, body))
        return DeliveryReceipt(message_id=f"msg-{len(self.sent)}", recipient=address)

    async def logout(self) -> None:
        self.calls.append("logout")
        if self.logout_delay:
            await asyncio.sleep(self.logout_delay)
        if self.logout_error is not None:
            raise self.logout_error

    async def force_teardown(self) -> None:
        self.calls.append("force_teardown")

    def emit(self, event: ClientEvent) -> None:
        assert self.sink is not None, "cliente não foi assinado"
        self.sink(event)
