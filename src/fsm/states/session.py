"""Estados da sessão da ponte e agrupamentos usados pelo SessionManager."""

from enum import StrEnum


class BridgeState(StrEnum):
    """Um estado por fase do pareamento.

    DISCONNECTED      repouso; único estado que aceita `start`
    INITIALIZING      cliente subindo, sem código ainda
    AWAITING_PAIRING  código emitido, esperando o celular
    AUTHENTICATED     credenciais aceitas, cliente sincronizando
    READY             envio liberado

    Não há estado terminal de erro: falhas voltam a DISCONNECTED.
    """

    DISCONNECTED = "DISCONNECTED"
    INITIALIZING = "INITIALIZING"
    AWAITING_PAIRING = "AWAITING_PAIRING"
    AUTHENTICATED = "AUTHENTICATED"
    READY = "READY"

    def __str__(self) -> str:
        return self.value


DEFAULT_INITIAL_STATE: BridgeState = BridgeState.DISCONNECTED

# Armam o idle guard: pareamento iniciado mas ainda não concluído
IDLE_GUARDED_STATES: frozenset[BridgeState] = frozenset(
    {BridgeState.INITIALIZING, BridgeState.AWAITING_PAIRING}
)

ACTIVE_STATES: frozenset[BridgeState] = frozenset(BridgeState) - {BridgeState.DISCONNECTED}


def is_idle_guarded(state: BridgeState) -> bool:
    return state in IDLE_GUARDED_STATES


def is_valid_state(state: BridgeState) -> bool:
    return isinstance(state, BridgeState)
