"""correlation_id da requisição HTTP corrente (ContextVar).

Definido pelo middleware do app e lido pelo CorrelationIdFilter. Fora
de requisição (eventos do cliente, disparo do idle guard) vale "".
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

CORRELATION_HEADER = "x-correlation-id"

_current: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    return uuid.uuid4().hex


def get_correlation_id() -> str:
    return _current.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Usa o ID recebido ou gera um; devolve o token para `reset_correlation_id`."""
    return _current.set(correlation_id or generate_correlation_id())


def reset_correlation_id(token: Token[str]) -> None:
    _current.reset(token)
