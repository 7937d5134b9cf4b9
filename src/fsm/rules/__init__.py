"""Guards aplicados depois do mapa de transições."""

from fsm.rules.guards import (
    DEFAULT_GUARDS,
    SELF_LOOP_STATES,
    Guard,
    GuardResult,
    evaluate_guards,
    guard_same_state,
    guard_valid_state,
)

__all__ = [
    "DEFAULT_GUARDS",
    "SELF_LOOP_STATES",
    "Guard",
    "GuardResult",
    "evaluate_guards",
    "guard_same_state",
    "guard_valid_state",
]
