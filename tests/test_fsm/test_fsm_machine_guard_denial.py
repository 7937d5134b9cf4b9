"""Um guard pode vetar uma aresta que existe no mapa."""

from __future__ import annotations

import pytest

import fsm.manager.machine as machine_module
from fsm import BridgeState, FSMStateMachine, GuardResult


def test_guard_veto_is_reported_as_rejection(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[tuple[BridgeState, BridgeState]] = []

    def veto(from_state: BridgeState, to_state: BridgeState) -> GuardResult:
        seen.append((from_state, to_state))
        return GuardResult.deny("vetado_pelo_guard")

    monkeypatch.setattr(machine_module, "evaluate_guards", veto)
    machine = FSMStateMachine(session_id="ponte")

    assert machine.can_transition_to(BridgeState.INITIALIZING) is False
    result = machine.transition(BridgeState.INITIALIZING, trigger="start")

    assert result.error_reason == "vetado_pelo_guard"
    assert machine.current_state is BridgeState.DISCONNECTED
    assert machine.history == []
    assert seen == [(BridgeState.DISCONNECTED, BridgeState.INITIALIZING)] * 2
