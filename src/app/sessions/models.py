"""Modelos da sessão da ponte.

`BridgeSession` guarda os campos mutáveis da sessão única do processo;
só a máquina de estados escreve nela. Leitores recebem cópias imutáveis
(`SessionSnapshot`, `PairingInfo`).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from fsm.states import BridgeState

if TYPE_CHECKING:
    from utils.errors import BridgeError


@dataclass(slots=True)
class BridgeSession:
    """Campos da sessão além do estado (que vive na FSM).

    Invariantes (garantidas por SessionStateMachine):
        - pairing_code != None  sse  estado == AWAITING_PAIRING
        - idle_deadline != None sse  estado ∈ {INITIALIZING, AWAITING_PAIRING}
        - account_label != None só se estado == READY
    """

    pairing_code: str | None = None
    account_label: str | None = None
    idle_deadline: datetime | None = None
    ready_at: datetime | None = None
    last_error: BridgeError | None = None
    epoch: int = 0


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Leitura consistente da sessão para polling/health."""

    state: BridgeState
    has_pairing_code: bool
    account_label: str | None
    idle_deadline: datetime | None
    ready_at: datetime | None
    last_error_code: str | None
    last_error_message: str | None

    @property
    def is_ready(self) -> bool:
        return self.state == BridgeState.READY

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "connected": self.is_ready,
            "has_pairing_code": self.has_pairing_code,
            "account": self.account_label,
            "idle_deadline": self.idle_deadline.isoformat() if self.idle_deadline else None,
            "ready_at": self.ready_at.isoformat() if self.ready_at else None,
            "last_error": (
                {"code": self.last_error_code, "message": self.last_error_message}
                if self.last_error_code
                else None
            ),
        }


@dataclass(frozen=True, slots=True)
class PairingInfo:
    """Dados de pareamento exibidos ao operador humano.

    Attributes:
        state: Estado no momento da leitura
        raw_code: Código bruto pendente (None fora de AWAITING_PAIRING)
        encoded_image: Imagem do código (data URL) quando renderizada
        error: Motivo da falha de renderização, se houver
    """

    state: BridgeState
    raw_code: str | None = None
    encoded_image: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.state == BridgeState.READY:
            return {"state": self.state.value}
        if self.raw_code is None:
            return {"state": self.state.value, "code": None}
        payload: dict[str, Any] = {
            "state": self.state.value,
            "encoded_image": self.encoded_image,
            "raw_code": self.raw_code,
        }
        if self.error:
            payload["error"] = self.error
        return payload
