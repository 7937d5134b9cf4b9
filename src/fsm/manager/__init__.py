"""FSMStateMachine e factory."""

from fsm.manager.machine import DEFAULT_HISTORY_LIMIT, FSMStateMachine, create_fsm

__all__ = ["DEFAULT_HISTORY_LIMIT", "FSMStateMachine", "create_fsm"]
