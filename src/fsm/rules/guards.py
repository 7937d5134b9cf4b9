"""Guards: regras extras aplicadas depois do mapa de transições.

O mapa diz quais arestas existem; um guard pode vetar uma aresta
existente. A lista padrão é pequena porque quase toda a política da
sessão vive no mapa.
"""

from collections.abc import Callable, Iterable

from fsm.states.session import BridgeState

# Único estado em que repetir o estado é uma transição legítima
SELF_LOOP_STATES: frozenset[BridgeState] = frozenset({BridgeState.AWAITING_PAIRING})


class GuardResult:
    """Veredito de um guard (`allowed` + motivo quando vetado)."""

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    def __repr__(self) -> str:
        return f"GuardResult(allowed={self.allowed!r}, reason={self.reason!r})"

    @classmethod
    def allow(cls) -> "GuardResult":
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        return cls(False, reason)


Guard = Callable[[BridgeState, BridgeState], GuardResult]


def guard_valid_state(from_state: BridgeState, to_state: BridgeState) -> GuardResult:
    """Recusa valores que não são BridgeState (ex: strings vindas de fora)."""
    for label, value in (("origem", from_state), ("destino", to_state)):
        if not isinstance(value, BridgeState):
            return GuardResult.deny(f"Estado de {label} inválido: {value!r}")
    return GuardResult.allow()


def guard_same_state(from_state: BridgeState, to_state: BridgeState) -> GuardResult:
    """Recusa X → X, exceto a rotação do código em AWAITING_PAIRING."""
    if from_state == to_state and from_state not in SELF_LOOP_STATES:
        return GuardResult.deny(
            f"Transição reflexiva não permitida: {from_state.name} → {to_state.name}"
        )
    return GuardResult.allow()


DEFAULT_GUARDS: tuple[Guard, ...] = (guard_valid_state, guard_same_state)


def evaluate_guards(
    from_state: BridgeState,
    to_state: BridgeState,
    guards: Iterable[Guard] | None = None,
) -> GuardResult:
    """Primeiro veto encontrado, ou allow() se nenhum guard vetar."""
    for guard in DEFAULT_GUARDS if guards is None else guards:
        result = guard(from_state, to_state)
        if not result.allowed:
            return result
    return GuardResult.allow()
