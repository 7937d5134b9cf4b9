"""Grafo de transições da sessão da ponte.

Toda falha (autenticação, queda, inatividade, logout) tem aresta para
DISCONNECTED, e de DISCONNECTED só se sai por `start`.
"""

from fsm.states.session import BridgeState

TransitionMap = dict[BridgeState, frozenset[BridgeState]]

# origem → destinos permitidos
VALID_TRANSITIONS: TransitionMap = {
    # DISCONNECTED: só sai via comando start
    BridgeState.DISCONNECTED: frozenset({
        BridgeState.INITIALIZING,
    }),

    # INITIALIZING: recebe código, autentica com credenciais salvas ou cai
    BridgeState.INITIALIZING: frozenset({
        BridgeState.AWAITING_PAIRING,
        BridgeState.AUTHENTICATED,
        BridgeState.DISCONNECTED,
    }),

    # AWAITING_PAIRING: rotação do código, autenticação ou queda
    BridgeState.AWAITING_PAIRING: frozenset({
        BridgeState.AWAITING_PAIRING,  # Rotação substitui o código
        BridgeState.AUTHENTICATED,
        BridgeState.DISCONNECTED,
    }),

    # AUTHENTICATED: aguarda sincronização (ready) ou cai
    BridgeState.AUTHENTICATED: frozenset({
        BridgeState.READY,
        BridgeState.DISCONNECTED,
    }),

    # READY: só sai por desconexão/logout
    BridgeState.READY: frozenset({
        BridgeState.DISCONNECTED,
    }),
}


def get_valid_targets(state: BridgeState) -> frozenset[BridgeState]:
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: BridgeState, to_state: BridgeState) -> bool:
    """True se a aresta existe no mapa (guards não são avaliados aqui)."""
    return to_state in get_valid_targets(from_state)


def validate_transition_map(transitions: TransitionMap | None = None) -> list[str]:
    """Confere a integridade do mapa; lista vazia significa mapa consistente.

    Regras:
        - todo BridgeState tem entrada no mapa
        - todo estado ativo tem aresta de volta para DISCONNECTED
        - destinos são BridgeState
    """
    graph = VALID_TRANSITIONS if transitions is None else transitions
    errors = [f"{state.name} sem entrada no mapa" for state in BridgeState if state not in graph]

    for source, targets in graph.items():
        if source != BridgeState.DISCONNECTED and BridgeState.DISCONNECTED not in targets:
            errors.append(f"{source.name} não tem saída para DISCONNECTED")
        errors.extend(
            f"{source.name} → {target!r}: destino não é BridgeState"
            for target in targets
            if not isinstance(target, BridgeState)
        )

    return errors
