"""FSMStateMachine: valida e registra as transições da sessão da ponte.

A FSM não conhece eventos nem efeitos colaterais. Recebe um estado alvo
e um gatilho, confere o mapa de transições e os guards, e guarda um
histórico limitado (o processo roda por semanas; o histórico não pode
crescer sem limite).
"""

from collections import deque
from typing import Any

from fsm.rules.guards import evaluate_guards
from fsm.states.session import DEFAULT_INITIAL_STATE, BridgeState
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult

DEFAULT_HISTORY_LIMIT = 100


class FSMStateMachine:
    """Estado corrente + histórico das últimas transições aceitas."""

    __slots__ = ("_history", "_session_id", "_state")

    def __init__(
        self,
        initial_state: BridgeState | None = None,
        session_id: str = "",
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self._state = initial_state or DEFAULT_INITIAL_STATE
        self._session_id = session_id
        self._history: deque[StateTransition] = deque(maxlen=history_limit)

    @property
    def current_state(self) -> BridgeState:
        return self._state

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def history(self) -> list[StateTransition]:
        """Cópia do histórico, da mais antiga para a mais recente."""
        return list(self._history)

    def get_valid_targets(self) -> frozenset[BridgeState]:
        return get_valid_targets(self._state)

    def can_transition_to(self, target: BridgeState) -> bool:
        return self._check(target) is None

    def transition(
        self,
        target: BridgeState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """Move para `target` se o mapa e os guards permitirem.

        Rejeição não altera estado nem histórico.
        """
        reason = self._check(target)
        if reason is not None:
            return TransitionResult.rejected(reason)

        transition = StateTransition(
            from_state=self._state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )
        self._state = target
        self._history.append(transition)
        return TransitionResult.accepted(transition)

    def _check(self, target: BridgeState) -> str | None:
        if not is_transition_valid(self._state, target):
            return f"Transição inválida: {self._state.name} → {target.name}"
        verdict = evaluate_guards(self._state, target)
        return None if verdict.allowed else verdict.reason

    def get_state_summary(self) -> dict[str, Any]:
        """Contexto anexado ao log `bridge_transition_rejected`."""
        return {
            "session_id": self._session_id,
            "current_state": self._state.name,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.name for s in self.get_valid_targets()),
        }


def create_fsm(
    session_id: str,
    initial_state: BridgeState | None = None,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> FSMStateMachine:
    """Atalho usado pelo SessionManager para montar a FSM da sessão."""
    return FSMStateMachine(
        initial_state=initial_state,
        session_id=session_id,
        history_limit=history_limit,
    )
