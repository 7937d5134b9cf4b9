"""Configuração de logging do processo da ponte.

Um único handler no root (stdout). Loggers do uvicorn são redirecionados
para ele, assim acessos HTTP e eventos da sessão saem no mesmo formato.

Uso:
    configure_logging(level="INFO", service_name="whatsapp_bridge")
    logger = get_logger(__name__)
    logger.info("bridge_state_changed", extra={"to_state": "READY"})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import create_json_formatter, create_text_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "whatsapp_bridge"

# Loggers de terceiros que instalam handlers próprios
PROPAGATED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
    *,
    json_output: bool = True,
) -> None:
    """Instala o handler do root; chamar uma vez no bootstrap.

    Chamadas repetidas substituem o handler anterior (útil em testes).

    Args:
        level: DEBUG, INFO, WARNING, ERROR ou CRITICAL (sem diferenciar caixa).
        service_name: Valor do campo `service` em todo record.
        correlation_id_getter: Fonte do correlation_id da requisição atual.
        json_output: False troca o JSON por texto legível no terminal.

    Raises:
        ValueError: Nível desconhecido.
    """
    normalized = level.upper()
    if normalized not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(normalized)
    handler.setFormatter(create_json_formatter() if json_output else create_text_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))

    root = logging.getLogger()
    root.setLevel(normalized)
    root.handlers = [handler]

    for name in PROPAGATED_LOGGERS:
        third_party = logging.getLogger(name)
        third_party.handlers = []
        third_party.propagate = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_fallback(
    logger: logging.Logger,
    component: str,
    reason: str | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """Registra que um caminho de contingência foi usado.

    Ex: o logout do cliente falhou e o teardown forçado assumiu:
        log_fallback(logger, "logout", reason="client_logout_failed")
    """
    extra: dict[str, object] = {"fallback_used": True, "component": component}
    if reason:
        extra["reason"] = reason
    if elapsed_ms is not None:
        extra["elapsed_ms"] = elapsed_ms
    logger.info("Fallback applied for %s", component, extra=extra)
