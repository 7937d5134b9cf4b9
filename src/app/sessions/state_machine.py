"""Máquina de estados da sessão da ponte.

Traduz comandos e eventos do cliente de mensagens em transições da FSM
e mantém os campos da sessão coerentes com o estado. Não faz I/O nem
sincronização: o SessionManager chama estes métodos sob o lock de escrita
e executa os efeitos externos (pareamento, teardown) conforme o resultado.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.observability.metrics import record_transition
from app.sessions.events import (
    Authenticated,
    AuthFailed,
    Disconnected,
    IdleTimeoutElapsed,
    LifecycleEvent,
    PairingCodeIssued,
    PairingStartFailed,
    Ready,
)
from app.sessions.models import BridgeSession, PairingInfo, SessionSnapshot
from fsm import BridgeState, FSMStateMachine, StateTransition, TransitionResult, is_idle_guarded
from utils.errors import BridgeError, InitTimeoutError, PairingFailedError

if TYPE_CHECKING:
    from app.observability.event_log import EventLog, EventType
    from app.sessions.idle_guard import IdleTimeoutGuard

logger = logging.getLogger(__name__)

TransitionListener = Callable[[StateTransition], None]

# Gatilhos registrados na FSM
TRIGGER_START = "start"
TRIGGER_PAIRING_CODE = "pairing_code"
TRIGGER_AUTHENTICATED = "authenticated"
TRIGGER_READY = "ready"
TRIGGER_AUTH_FAILED = "auth_failed"
TRIGGER_DISCONNECTED = "disconnected"
TRIGGER_IDLE_TIMEOUT = "idle_timeout"
TRIGGER_PAIRING_START_FAILED = "pairing_start_failed"
TRIGGER_LOGOUT = "logout"


class SessionStateMachine:
    """Dona do estado, do código de pareamento, do rótulo e do guard."""

    def __init__(
        self,
        fsm: FSMStateMachine,
        guard: IdleTimeoutGuard,
        idle_timeout_seconds: float,
        event_log: EventLog,
    ) -> None:
        self._fsm = fsm
        self._guard = guard
        self._idle_timeout_seconds = idle_timeout_seconds
        self._event_log = event_log
        self._session = BridgeSession()
        self._listeners: list[TransitionListener] = []

    @property
    def state(self) -> BridgeState:
        return self._fsm.current_state

    @property
    def epoch(self) -> int:
        return self._session.epoch

    @property
    def history(self) -> list[StateTransition]:
        return self._fsm.history

    def add_listener(self, listener: TransitionListener) -> None:
        self._listeners.append(listener)

    # ──────────────────────────────────────────────────────────────────────
    # Leituras
    # ──────────────────────────────────────────────────────────────────────

    def snapshot(self) -> SessionSnapshot:
        session = self._session
        error = session.last_error
        return SessionSnapshot(
            state=self.state,
            has_pairing_code=session.pairing_code is not None,
            account_label=session.account_label,
            idle_deadline=session.idle_deadline,
            ready_at=session.ready_at,
            last_error_code=error.code if error else None,
            last_error_message=str(error) if error else None,
        )

    def pairing_info(self) -> PairingInfo:
        """Estado e código pendente lidos juntos (sem imagem)."""
        return PairingInfo(state=self.state, raw_code=self._session.pairing_code)

    # ──────────────────────────────────────────────────────────────────────
    # Comandos
    # ──────────────────────────────────────────────────────────────────────

    def begin_start(self) -> TransitionResult:
        """DISCONNECTED → INITIALIZING; abre nova época e arma o guard."""
        result = self._enter(BridgeState.INITIALIZING, TRIGGER_START)
        if result.success:
            self._session.epoch += 1
            self._session.last_error = None
        return result

    def reset(
        self,
        trigger: str,
        *,
        error: BridgeError | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """Qualquer estado ativo → DISCONNECTED, limpando a sessão."""
        result = self._enter(BridgeState.DISCONNECTED, trigger, metadata=metadata)
        if result.success and error is not None:
            self._session.last_error = error
        return result

    # ──────────────────────────────────────────────────────────────────────
    # Eventos
    # ──────────────────────────────────────────────────────────────────────

    def apply(self, event: LifecycleEvent) -> TransitionResult | None:
        """Aplica um evento do canal.

        Returns:
            Resultado da transição, ou None se o evento foi descartado
            (geração/época obsoleta, ou desconexão já em DISCONNECTED).
        """
        if isinstance(event, PairingCodeIssued):
            return self._enter(
                BridgeState.AWAITING_PAIRING,
                TRIGGER_PAIRING_CODE,
                pairing_code=event.code,
            )

        if isinstance(event, Authenticated):
            return self._enter(BridgeState.AUTHENTICATED, TRIGGER_AUTHENTICATED)

        if isinstance(event, Ready):
            return self._enter(
                BridgeState.READY,
                TRIGGER_READY,
                account_label=event.account_label,
            )

        if self.state == BridgeState.DISCONNECTED:
            # Falhas tardias não têm o que derrubar
            logger.debug("bridge_event_ignored", extra={"event": type(event).__name__})
            return None

        if isinstance(event, AuthFailed):
            return self.reset(
                TRIGGER_AUTH_FAILED,
                error=PairingFailedError(event.reason or "authentication failure"),
                metadata={"reason": event.reason},
            )

        if isinstance(event, Disconnected):
            return self.reset(TRIGGER_DISCONNECTED, metadata={"reason": event.reason})

        if isinstance(event, IdleTimeoutElapsed):
            if not self._guard.is_current(event.generation):
                return None
            return self.reset(
                TRIGGER_IDLE_TIMEOUT,
                error=InitTimeoutError(
                    f"not authenticated within {self._idle_timeout_seconds:g}s"
                ),
            )

        if isinstance(event, PairingStartFailed):
            if event.epoch != self._session.epoch or not is_idle_guarded(self.state):
                return None
            return self.reset(
                TRIGGER_PAIRING_START_FAILED,
                error=PairingFailedError(event.reason),
                metadata={"reason": event.reason},
            )

        raise TypeError(f"Evento desconhecido: {event!r}")

    # ──────────────────────────────────────────────────────────────────────
    # Núcleo
    # ──────────────────────────────────────────────────────────────────────

    def _enter(
        self,
        target: BridgeState,
        trigger: str,
        *,
        pairing_code: str | None = None,
        account_label: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        from_state = self.state
        result = self._fsm.transition(target, trigger, metadata)
        if not result.success:
            logger.warning(
                "bridge_transition_rejected",
                extra={
                    **self._fsm.get_state_summary(),
                    "from_state": from_state.value,
                    "to_state": target.value,
                    "trigger": trigger,
                    "reason": result.error_reason,
                },
            )
            return result

        session = self._session
        session.pairing_code = pairing_code if target == BridgeState.AWAITING_PAIRING else None
        if target == BridgeState.READY:
            session.account_label = account_label or ""
            session.ready_at = datetime.now(UTC)
        else:
            session.account_label = None
            session.ready_at = None

        if is_idle_guarded(target):
            session.idle_deadline = self._guard.arm(self._idle_timeout_seconds)
        else:
            self._guard.disarm()
            session.idle_deadline = None

        transition = result.transition
        if transition is None:
            return result
        logger.info("bridge_state_changed", extra=transition.to_log_dict())
        record_transition(from_state.value, target.value, trigger)
        self._log_event(transition)
        for listener in self._listeners:
            try:
                listener(transition)
            except Exception:
                logger.exception("bridge_listener_failed", extra={"trigger": trigger})
        return result

    def _log_event(self, transition: StateTransition) -> None:
        type_, message = _describe_transition(transition)
        self._event_log.append(type_, message)


# Mensagens do log de eventos por estado de destino
_ENTRY_MESSAGES: dict[BridgeState, tuple[EventType, str]] = {
    BridgeState.INITIALIZING: ("INFO", "Initialization requested"),
    BridgeState.AWAITING_PAIRING: ("INFO", "QR code generated"),
    BridgeState.AUTHENTICATED: ("INFO", "Client authenticated"),
    BridgeState.READY: ("SUCCESS", "WhatsApp client is ready"),
}

# Mensagens de queda para DISCONNECTED por gatilho
_TEARDOWN_MESSAGES: dict[str, tuple[EventType, str]] = {
    TRIGGER_AUTH_FAILED: ("ERROR", "Authentication failure: {reason}"),
    TRIGGER_PAIRING_START_FAILED: ("ERROR", "Failed to initialize client: {reason}"),
    TRIGGER_IDLE_TIMEOUT: ("WARN", "Pairing not completed in time, session closed"),
    TRIGGER_LOGOUT: ("INFO", "Logged out"),
    TRIGGER_DISCONNECTED: ("WARN", "Client was disconnected: {reason}"),
}


def _describe_transition(transition: StateTransition) -> tuple[EventType, str]:
    if transition.to_state in _ENTRY_MESSAGES:
        return _ENTRY_MESSAGES[transition.to_state]
    type_, template = _TEARDOWN_MESSAGES.get(
        transition.trigger, _TEARDOWN_MESSAGES[TRIGGER_DISCONNECTED]
    )
    reason = transition.metadata.get("reason") or "unknown"
    return type_, template.format(reason=reason)
