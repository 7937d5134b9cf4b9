"""Registros imutáveis produzidos pela FSM da ponte."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fsm.states.session import BridgeState


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class StateTransition:
    """Uma mudança de estado aceita pela FSM.

    `metadata` segue para os logs: motivo de desconexão, estado de origem
    do logout etc. Telefone e corpo de mensagem nunca entram aqui.
    """

    from_state: BridgeState
    to_state: BridgeState
    trigger: str
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        if not (self.trigger and self.trigger.strip()):
            raise ValueError("trigger não pode ser vazio")

    @property
    def is_teardown(self) -> bool:
        """True quando a sessão caiu para DISCONNECTED."""
        return self.to_state == BridgeState.DISCONNECTED

    def to_log_dict(self) -> dict[str, Any]:
        return {
            "from_state": self.from_state.name,
            "to_state": self.to_state.name,
            "trigger": self.trigger,
            "metadata": self.metadata,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """Resposta de `FSMStateMachine.transition`.

    Exatamente um de `transition` (aceita) ou `error_reason` (rejeitada)
    vem preenchido.
    """

    success: bool
    transition: StateTransition | None = None
    error_reason: str | None = None

    def __post_init__(self) -> None:
        if self.success and self.transition is None:
            raise ValueError("Resultado de sucesso deve incluir transition")
        if not self.success and self.error_reason is None:
            raise ValueError("Resultado de falha deve incluir error_reason")

    @classmethod
    def accepted(cls, transition: StateTransition) -> "TransitionResult":
        return cls(success=True, transition=transition)

    @classmethod
    def rejected(cls, reason: str) -> "TransitionResult":
        return cls(success=False, error_reason=reason)
