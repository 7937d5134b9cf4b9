"""FSM do ciclo de vida da sessão da ponte WhatsApp.

DISCONNECTED → INITIALIZING → AWAITING_PAIRING ⟲ → AUTHENTICATED → READY,
com queda para DISCONNECTED a partir de qualquer estado ativo.

Subpacotes: states/ (enum), transitions/ (mapa), rules/ (guards),
manager/ (FSMStateMachine), types/ (StateTransition, TransitionResult).
"""

from fsm.manager import DEFAULT_HISTORY_LIMIT, FSMStateMachine, create_fsm
from fsm.rules import GuardResult, evaluate_guards
from fsm.states import (
    ACTIVE_STATES,
    DEFAULT_INITIAL_STATE,
    IDLE_GUARDED_STATES,
    BridgeState,
    is_idle_guarded,
    is_valid_state,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import StateTransition, TransitionResult

__all__ = [
    "ACTIVE_STATES",
    "DEFAULT_HISTORY_LIMIT",
    "DEFAULT_INITIAL_STATE",
    "IDLE_GUARDED_STATES",
    "VALID_TRANSITIONS",
    "BridgeState",
    "FSMStateMachine",
    "GuardResult",
    "StateTransition",
    "TransitionResult",
    "create_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_idle_guarded",
    "is_transition_valid",
    "is_valid_state",
    "validate_transition_map",
]
