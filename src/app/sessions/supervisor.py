"""Supervisor de reconexão (política externa à máquina de estados).

Observa transições do SessionManager e decide se chama `start()` de novo.
Só reconecta após desconexões vindas do cliente cujo motivo não é logout;
falhas de autenticação, timeout de inatividade e logout explícito nunca
disparam reconexão, para evitar laços apertados de falha.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from app.sessions.state_machine import TRIGGER_DISCONNECTED
from fsm import BridgeState

if TYPE_CHECKING:
    from app.sessions.manager import SessionManager
    from config.settings.bridge import BridgeSettings
    from fsm import StateTransition

logger = logging.getLogger(__name__)

# Motivos de desconexão que significam logout feito pelo usuário no aparelho
LOGOUT_REASONS = frozenset({"LOGOUT", "LOGGED_OUT", "loggedOut"})


class ReconnectSupervisor:
    """Reconecta a sessão após quedas inesperadas, com limite de tentativas."""

    def __init__(self, manager: SessionManager, settings: BridgeSettings) -> None:
        self._manager = manager
        self._policy = settings.reconnect_policy
        self._delay_seconds = settings.reconnect_delay_seconds
        self._max_attempts = settings.reconnect_max_attempts
        self._attempts = 0
        self._pending: asyncio.Task[None] | None = None
        manager.add_listener(self._on_transition)

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def _on_transition(self, transition: StateTransition) -> None:
        if transition.to_state == BridgeState.READY:
            self._attempts = 0
            return

        if not self._should_reconnect(transition):
            return

        if self._attempts >= self._max_attempts:
            logger.warning(
                "bridge_reconnect_exhausted",
                extra={"attempts": self._attempts, "max_attempts": self._max_attempts},
            )
            return

        if self.pending:
            return

        self._attempts += 1
        logger.info(
            "bridge_reconnect_scheduled",
            extra={"attempt": self._attempts, "delay_seconds": self._delay_seconds},
        )
        self._pending = asyncio.get_running_loop().create_task(self._reconnect())

    def _should_reconnect(self, transition: StateTransition) -> bool:
        if self._policy != "on_disconnect":
            return False
        if not transition.is_teardown or transition.trigger != TRIGGER_DISCONNECTED:
            return False
        return transition.metadata.get("reason") not in LOGOUT_REASONS

    async def _reconnect(self) -> None:
        await asyncio.sleep(self._delay_seconds)
        try:
            await self._manager.start()
        except Exception as exc:
            logger.error("bridge_reconnect_failed", extra={"error_type": type(exc).__name__})

    async def aclose(self) -> None:
        """Cancela reconexão agendada, se houver."""
        if self._pending is not None:
            self._pending.cancel()
            await asyncio.gather(self._pending, return_exceptions=True)
            self._pending = None
