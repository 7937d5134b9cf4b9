"""Estados da sessão da ponte e agrupamentos."""

from fsm.states.session import (
    ACTIVE_STATES,
    DEFAULT_INITIAL_STATE,
    IDLE_GUARDED_STATES,
    BridgeState,
    is_idle_guarded,
    is_valid_state,
)

__all__ = [
    "ACTIVE_STATES",
    "DEFAULT_INITIAL_STATE",
    "IDLE_GUARDED_STATES",
    "BridgeState",
    "is_idle_guarded",
    "is_valid_state",
]
