"""Gerenciador da sessão única da ponte WhatsApp (façade).

Coordena máquina de estados, guard de inatividade, normalização de
destinatários e o cliente de mensagens.

Disciplina de escrita única:
    - Comandos (start, logout) e eventos rodam sob o mesmo asyncio.Lock.
    - Eventos do cliente e do guard entram por `publish` (síncrono) numa
      fila drenada por uma única task worker.
    - Leituras (describe, get_pairing_info) são síncronas e montadas entre
      awaits, portanto nunca misturam campos de estados diferentes.
    - `send` só lê a prontidão; a chamada de rede roda fora do lock.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any

from app.domain.recipient import normalize
from app.observability.event_log import EventLog
from app.observability.metrics import record_delivery, record_latency
from app.sessions.events import (
    IdleTimeoutElapsed,
    LifecycleEvent,
    PairingStartFailed,
)
from app.sessions.idle_guard import IdleTimeoutGuard
from app.sessions.models import PairingInfo, SessionSnapshot
from app.sessions.state_machine import (
    TRIGGER_LOGOUT,
    SessionStateMachine,
    TransitionListener,
)
from config.logging import log_fallback
from config.settings.bridge import BridgeSettings
from fsm import BridgeState, create_fsm
from utils.errors import DeliveryFailedError, InvalidArgumentError, NotConnectedError

if TYPE_CHECKING:
    from app.observability.event_log import BridgeEvent
    from app.protocols.messaging_client import DeliveryReceipt, MessagingClientProtocol
    from app.protocols.qr_renderer import QrRendererProtocol

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "whatsapp-bridge"


class SessionManager:
    """Façade da sessão da ponte: única instância por processo."""

    def __init__(
        self,
        client: MessagingClientProtocol,
        settings: BridgeSettings | None = None,
        qr_renderer: QrRendererProtocol | None = None,
        session_id: str = DEFAULT_SESSION_ID,
    ) -> None:
        """Inicializa o gerenciador e assina os eventos do cliente.

        Args:
            client: Cliente de mensagens (colaborador externo)
            settings: Configurações da ponte (usa defaults se None)
            qr_renderer: Renderizador opcional do código em imagem
            session_id: Identificador usado nos logs da FSM
        """
        self._client = client
        self._settings = settings or BridgeSettings()
        self._qr_renderer = qr_renderer
        self._lock = asyncio.Lock()
        self._events: asyncio.Queue[LifecycleEvent] = asyncio.Queue()
        self._worker: asyncio.Task[None] | None = None
        self._background: set[asyncio.Task[None]] = set()
        self._closed = False

        self._event_log = EventLog(self._settings.event_log_size)
        self._guard = IdleTimeoutGuard(self.publish)
        self._machine = SessionStateMachine(
            fsm=create_fsm(session_id),
            guard=self._guard,
            idle_timeout_seconds=self._settings.idle_timeout_seconds,
            event_log=self._event_log,
        )
        client.subscribe(self.publish)

    # ──────────────────────────────────────────────────────────────────────
    # Leituras
    # ──────────────────────────────────────────────────────────────────────

    @property
    def state(self) -> BridgeState:
        return self._machine.state

    def describe(self) -> SessionSnapshot:
        """Snapshot consistente do estado atual (sem efeitos colaterais)."""
        return self._machine.snapshot()

    def get_pairing_info(self) -> PairingInfo:
        """Código de pareamento pendente, com imagem quando há renderizador.

        Falha de renderização não é fatal: devolve o código bruto com
        `encoded_image=None` e o motivo em `error`.
        """
        info = self._machine.pairing_info()
        if info.raw_code is None or self._qr_renderer is None:
            return info
        try:
            image = self._qr_renderer.render(info.raw_code)
        except Exception as exc:
            logger.warning("qr_render_failed", extra={"error_type": type(exc).__name__})
            return PairingInfo(
                state=info.state,
                raw_code=info.raw_code,
                error="QR generation failed",
            )
        return PairingInfo(state=info.state, raw_code=info.raw_code, encoded_image=image)

    def recent_events(self, limit: int | None = None) -> list[BridgeEvent]:
        return self._event_log.recent(limit)

    def add_listener(self, listener: TransitionListener) -> None:
        """Registra observador de transições (ex: supervisor de reconexão)."""
        self._machine.add_listener(listener)

    # ──────────────────────────────────────────────────────────────────────
    # Comandos
    # ──────────────────────────────────────────────────────────────────────

    async def start(self) -> SessionSnapshot:
        """Inicia o pareamento sem bloquear até READY.

        No-op (idempotente) se a sessão não está em DISCONNECTED.

        Returns:
            Snapshot após o comando
        """
        async with self._lock:
            if self._machine.state != BridgeState.DISCONNECTED:
                logger.debug("bridge_start_ignored", extra={"state": self.state.value})
                return self.describe()

            result = self._machine.begin_start()
            if result.success:
                self._ensure_worker()
                self._spawn(self._begin_pairing(self._machine.epoch))
            return self.describe()

    async def send(self, raw_recipient: str, body: str) -> DeliveryReceipt:
        """Envia texto para um telefone (PendingSend efêmero).

        Raises:
            NotConnectedError: Sessão fora de READY (nenhuma chamada ao cliente)
            InvalidArgumentError: Destinatário ou corpo vazio
            DeliveryFailedError: Cliente falhou ou excedeu o timeout
        """
        if self._machine.state != BridgeState.READY:
            record_delivery("rejected", NotConnectedError.code)
            raise NotConnectedError("WhatsApp not connected")

        if not raw_recipient or not raw_recipient.strip() or not body or not body.strip():
            record_delivery("rejected", InvalidArgumentError.code)
            raise InvalidArgumentError("Phone and message are required")

        settings = self._settings
        address = normalize(
            raw_recipient,
            country_code=settings.country_code,
            local_prefix=settings.local_prefix,
            suffix=settings.address_suffix,
        )

        started_at = time.perf_counter()
        try:
            receipt = await asyncio.wait_for(
                self._client.send_text(address.jid, body),
                timeout=settings.send_timeout_seconds,
            )
        except Exception as exc:
            logger.warning(
                "bridge_send_failed",
                extra={"recipient": address.masked, "error_type": type(exc).__name__},
            )
            self._event_log.append("ERROR", f"Failed to send to {address.masked}: {exc}")
            record_delivery("failed", DeliveryFailedError.code)
            raise DeliveryFailedError(f"Failed to send message: {exc}") from exc
        finally:
            record_latency(
                "messaging_client", "send_text", (time.perf_counter() - started_at) * 1000
            )

        logger.info("bridge_message_sent", extra={"recipient": address.masked})
        self._event_log.append("MESSAGE", f"Sent to {address.masked}")
        record_delivery("delivered")
        return receipt

    async def logout(self) -> SessionSnapshot:
        """Encerra a sessão; termina sempre em DISCONNECTED.

        Logout do cliente que falhe (ou exceda o timeout) cai para o
        teardown forçado; o estado é resetado em qualquer caso.
        """
        async with self._lock:
            if self._machine.state == BridgeState.DISCONNECTED:
                return self.describe()

            from_state = self._machine.state
            started_at = time.perf_counter()
            try:
                await asyncio.wait_for(
                    self._client.logout(),
                    timeout=self._settings.logout_timeout_seconds,
                )
            except Exception as exc:
                logger.warning(
                    "bridge_logout_failed",
                    extra={"state": from_state.value, "error_type": type(exc).__name__},
                )
                log_fallback(logger, "logout", reason="client_logout_failed")
                await self._teardown_client(TRIGGER_LOGOUT)
            finally:
                record_latency(
                    "messaging_client", "logout", (time.perf_counter() - started_at) * 1000
                )
                self._machine.reset(TRIGGER_LOGOUT, metadata={"from_state": from_state.value})

            return self.describe()

    # ──────────────────────────────────────────────────────────────────────
    # Canal de eventos
    # ──────────────────────────────────────────────────────────────────────

    def publish(self, event: LifecycleEvent) -> None:
        """Enfileira evento do cliente ou do guard (não bloqueia).

        Deve ser chamado na thread do event loop.
        """
        if self._closed:
            logger.debug("bridge_event_dropped", extra={"event": type(event).__name__})
            return
        self._events.put_nowait(event)
        self._ensure_worker()

    async def drain(self) -> None:
        """Aguarda até que todos os eventos enfileirados sejam aplicados."""
        await self._events.join()

    async def aclose(self) -> None:
        """Para o worker e tasks de fundo. Não faz logout do cliente."""
        self._closed = True
        self._guard.disarm()
        tasks = [t for t in (self._worker, *self._background) if t is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._worker = None
        self._background.clear()

    def _ensure_worker(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(self._run_worker())

    async def _run_worker(self) -> None:
        while True:
            event = await self._events.get()
            try:
                async with self._lock:
                    await self._handle_event(event)
            except Exception:
                logger.exception("bridge_event_failed", extra={"event": type(event).__name__})
            finally:
                self._events.task_done()

    async def _handle_event(self, event: LifecycleEvent) -> None:
        result = self._machine.apply(event)
        if result is None or result.transition is None:
            return
        if isinstance(event, (IdleTimeoutElapsed, PairingStartFailed)):
            await self._teardown_client(result.transition.trigger)

    # ──────────────────────────────────────────────────────────────────────
    # Efeitos externos
    # ──────────────────────────────────────────────────────────────────────

    async def _begin_pairing(self, epoch: int) -> None:
        try:
            await self._client.begin_pairing()
        except Exception as exc:
            logger.error(
                "bridge_pairing_start_failed",
                extra={"epoch": epoch, "error_type": type(exc).__name__},
            )
            self.publish(PairingStartFailed(epoch=epoch, reason=str(exc) or type(exc).__name__))

    async def _teardown_client(self, trigger: str) -> None:
        try:
            await asyncio.wait_for(
                self._client.force_teardown(),
                timeout=self._settings.logout_timeout_seconds,
            )
        except Exception as exc:
            logger.warning(
                "bridge_teardown_failed",
                extra={"trigger": trigger, "error_type": type(exc).__name__},
            )

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
