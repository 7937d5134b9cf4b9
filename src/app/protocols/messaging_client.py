"""Protocolo do cliente de mensagens (colaborador externo).

O cliente é dono do protocolo de rede, do armazenamento de credenciais
e da emissão de eventos de ciclo de vida. A ponte só o comanda por
estas operações e recebe eventos pelo sink registrado em `subscribe`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.sessions.events import EventSink


@dataclass(frozen=True, slots=True)
class DeliveryReceipt:
    """Confirmação de envio devolvida pelo cliente.

    Attributes:
        message_id: ID serializado da mensagem na plataforma
        recipient: Endereço (jid) para o qual a mensagem foi enviada
    """

    message_id: str
    recipient: str

    def to_dict(self) -> dict[str, Any]:
        return {"success": True, "id": self.message_id}


class MessagingClientProtocol(Protocol):
    """Contrato mínimo do cliente de mensagens."""

    def subscribe(self, sink: EventSink) -> None:
        """Registra o sink que recebe os eventos de ciclo de vida."""
        ...

    async def begin_pairing(self) -> None:
        """Inicia o cliente (emite código ou autentica com credenciais salvas)."""
        ...

    async def send_text(self, address: str, body: str) -> DeliveryReceipt:
        """Envia texto para o endereço canônico."""
        ...

    async def logout(self) -> None:
        """Encerra a sessão na plataforma e remove credenciais salvas."""
        ...

    async def force_teardown(self) -> None:
        """Destrói o cliente local sem depender da plataforma."""
        ...
