"""Log em memória dos eventos recentes da ponte.

Buffer circular exibido ao operador (/logs e /status). Mais recentes
primeiro. Nunca registrar corpo de mensagem nem telefone completo.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal

EventType = Literal["INFO", "SUCCESS", "WARN", "ERROR", "MESSAGE", "SYSTEM"]

DEFAULT_EVENT_LOG_SIZE = 50


@dataclass(frozen=True, slots=True)
class BridgeEvent:
    """Entrada do log de eventos."""

    type: EventType
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, str]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "type": self.type,
            "message": self.message,
        }


class EventLog:
    """Buffer circular de eventos com capacidade fixa."""

    __slots__ = ("_entries",)

    def __init__(self, max_entries: int = DEFAULT_EVENT_LOG_SIZE) -> None:
        self._entries: deque[BridgeEvent] = deque(maxlen=max_entries)

    def append(self, type_: EventType, message: str) -> BridgeEvent:
        entry = BridgeEvent(type=type_, message=message)
        self._entries.appendleft(entry)
        return entry

    def recent(self, limit: int | None = None) -> list[BridgeEvent]:
        """Retorna até `limit` eventos, mais recentes primeiro."""
        entries = list(self._entries)
        return entries if limit is None else entries[:limit]

    def __len__(self) -> int:
        return len(self._entries)
