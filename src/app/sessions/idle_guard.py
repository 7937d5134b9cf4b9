"""Guard de inatividade para INITIALIZING/AWAITING_PAIRING.

Agenda um único disparo; re-armar substitui o agendamento anterior
(última escrita vence). Cada arm/disarm avança a geração, e o disparo
só é publicado se a geração agendada ainda for a atual. O consumidor
revalida com `is_current` antes de agir, já sob o lock de escrita.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from app.sessions.events import EventSink, IdleTimeoutElapsed

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class IdleTimeoutGuard:
    """Contagem regressiva cancelável com proteção por geração."""

    __slots__ = ("_clock", "_deadline", "_generation", "_handle", "_sink")

    def __init__(
        self,
        sink: EventSink,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Args:
            sink: Canal onde o disparo é publicado (IdleTimeoutElapsed)
            clock: Relógio UTC usado para calcular o deadline
        """
        self._sink = sink
        self._clock = clock
        self._generation = 0
        self._handle: asyncio.TimerHandle | None = None
        self._deadline: datetime | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def deadline(self) -> datetime | None:
        return self._deadline

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def arm(self, duration: float) -> datetime:
        """Agenda (ou re-agenda) o disparo em `duration` segundos.

        Deve ser chamado com um event loop em execução.

        Returns:
            Novo deadline (UTC)
        """
        self._cancel_handle()
        self._generation += 1
        generation = self._generation
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(duration, self._fire, generation)
        self._deadline = self._clock() + timedelta(seconds=duration)
        logger.debug(
            "idle_guard_armed",
            extra={"generation": generation, "duration_seconds": duration},
        )
        return self._deadline

    def disarm(self) -> None:
        """Cancela o disparo pendente. No-op se nada estiver agendado."""
        if self._handle is None and self._deadline is None:
            return
        self._cancel_handle()
        self._generation += 1
        self._deadline = None
        logger.debug("idle_guard_disarmed", extra={"generation": self._generation})

    def is_current(self, generation: int) -> bool:
        """True se `generation` é a do agendamento vigente e ainda armado."""
        return self._deadline is not None and generation == self._generation

    def _cancel_handle(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._handle = None
        logger.info("idle_guard_fired", extra={"generation": generation})
        self._sink(IdleTimeoutElapsed(generation=generation))
