"""Eventos de ciclo de vida consumidos pela máquina de estados.

Eventos públicos são emitidos pelo cliente de mensagens (colaborador
externo). Eventos internos são publicados pela própria ponte (guard de
inatividade e falha assíncrona do início de pareamento) no mesmo canal,
para que toda mutação passe pelo mesmo escritor.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PairingCodeIssued:
    """Novo código de pareamento (emitido no início e a cada rotação)."""

    code: str


@dataclass(frozen=True, slots=True)
class Authenticated:
    """Credenciais aceitas (código lido ou credenciais salvas)."""


@dataclass(frozen=True, slots=True)
class Ready:
    """Cliente sincronizado e apto a enviar mensagens."""

    account_label: str = ""


@dataclass(frozen=True, slots=True)
class AuthFailed:
    """Falha de autenticação reportada pelo cliente."""

    reason: str = ""


@dataclass(frozen=True, slots=True)
class Disconnected:
    """Conexão encerrada pelo cliente ou pela plataforma."""

    reason: str = ""


# Internos


@dataclass(frozen=True, slots=True)
class IdleTimeoutElapsed:
    """Guard de inatividade disparou para a geração indicada."""

    generation: int


@dataclass(frozen=True, slots=True)
class PairingStartFailed:
    """`begin_pairing` do cliente levantou exceção na época indicada."""

    epoch: int
    reason: str


ClientEvent = PairingCodeIssued | Authenticated | Ready | AuthFailed | Disconnected
LifecycleEvent = ClientEvent | IdleTimeoutElapsed | PairingStartFailed

# Sink síncrono: pode ser chamado de callbacks do cliente sem await
EventSink = Callable[[LifecycleEvent], None]
