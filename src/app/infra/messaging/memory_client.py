"""Cliente de mensagens em memória, apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Não fala com a rede: simula
emissão/rotação de código, leitura do código pelo aparelho, credenciais
salvas, quedas e envios.
"""

from __future__ import annotations

import secrets
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from app.protocols.messaging_client import DeliveryReceipt
from app.sessions.events import (
    Authenticated,
    AuthFailed,
    Disconnected,
    PairingCodeIssued,
    Ready,
)

if TYPE_CHECKING:
    from app.sessions.events import ClientEvent, EventSink


@dataclass(frozen=True, slots=True)
class SentMessage:
    """Mensagem registrada pelo cliente em memória."""

    address: str
    body: str
    message_id: str
    sent_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class MemoryMessagingClient:
    """Cliente em memória que implementa MessagingClientProtocol."""

    def __init__(self, account_label: str = "memory-device") -> None:
        self._sink: EventSink | None = None
        self._account_label = account_label
        self._stored_credentials = False
        self._running = False
        self._connected = False
        self.current_code: str | None = None
        self.sent: list[SentMessage] = []

    @property
    def has_stored_credentials(self) -> bool:
        return self._stored_credentials

    @property
    def connected(self) -> bool:
        return self._connected

    def subscribe(self, sink: EventSink) -> None:
        self._sink = sink

    # Operações do protocolo

    async def begin_pairing(self) -> None:
        self._running = True
        if self._stored_credentials:
            self._complete_login()
            return
        self.rotate_code()

    async def send_text(self, address: str, body: str) -> DeliveryReceipt:
        if not self._connected:
            raise RuntimeError("client not connected")
        message_id = f"true_{address}_{uuid.uuid4().hex[:20].upper()}"
        self.sent.append(SentMessage(address=address, body=body, message_id=message_id))
        return DeliveryReceipt(message_id=message_id, recipient=address)

    async def logout(self) -> None:
        self._stored_credentials = False
        self._shutdown()

    async def force_teardown(self) -> None:
        # Teardown também invalida a sessão salva: o próximo start pede código
        self._stored_credentials = False
        self._shutdown()

    # Simulação (chamadas pelo desenvolvedor/testes)

    def rotate_code(self) -> str:
        """Emite um novo código de pareamento (substitui o anterior)."""
        self.current_code = f"2@{secrets.token_urlsafe(24)}"
        self._emit(PairingCodeIssued(code=self.current_code))
        return self.current_code

    def confirm_pairing(self) -> None:
        """Simula o aparelho lendo o código: autentica e fica pronto."""
        if not self._running or self.current_code is None:
            raise RuntimeError("no pairing code pending")
        self._stored_credentials = True
        self._complete_login()

    def drop_connection(self, reason: str = "NAVIGATION") -> None:
        self._connected = False
        self._running = False
        self._emit(Disconnected(reason=reason))

    def reject_credentials(self, reason: str = "invalid session") -> None:
        self._stored_credentials = False
        self._connected = False
        self._running = False
        self._emit(AuthFailed(reason=reason))

    def _complete_login(self) -> None:
        self.current_code = None
        self._connected = True
        self._emit(Authenticated())
        self._emit(Ready(account_label=self._account_label))

    def _shutdown(self) -> None:
        self._running = False
        self._connected = False
        self.current_code = None

    def _emit(self, event: ClientEvent) -> None:
        if self._sink is not None:
            self._sink(event)
