"""Métricas emitidas como linhas de log (`metric_*`).

Não há coletor no processo: o backend de logs agrega pelos campos
`metric_type`, `component` e `outcome`.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def _emit(name: str, metric_type: str, component: str, **fields: object) -> None:
    extra = {"metric_type": metric_type, "component": component}
    extra.update({key: value for key, value in fields.items() if value is not None})
    logger.info(name, extra=extra)


def record_latency(component: str, operation: str, latency_ms: float) -> None:
    """Duração de uma chamada ao cliente de mensagens, em ms."""
    _emit(
        "metric_latency",
        "latency",
        component,
        operation=operation,
        latency_ms=round(latency_ms, 2),
    )


def record_delivery(outcome: str, error_code: str | None = None) -> None:
    # outcome: delivered | rejected | failed
    _emit("metric_delivery", "delivery", "bridge", outcome=outcome, error_code=error_code)


def record_transition(from_state: str, to_state: str, trigger: str) -> None:
    _emit(
        "metric_transition",
        "transition",
        "session_state_machine",
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )
