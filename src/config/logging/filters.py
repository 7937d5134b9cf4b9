"""Filter que carimba `service` e `correlation_id` em cada record."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


def _no_correlation_id() -> str:
    return ""


class CorrelationIdFilter(logging.Filter):
    """Enriquece records; nunca descarta nenhum.

    Eventos do cliente de mensagens e disparos do guard rodam fora de
    requisição HTTP, então o correlation_id deles sai vazio. Um valor
    passado via `extra` tem precedência sobre o do contexto.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._correlation_id = correlation_id_getter or _no_correlation_id

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = self._correlation_id()
        record.service = self._service_name
        return True
