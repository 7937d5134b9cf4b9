"""Correlation id, métricas em log e o log de eventos exibido ao operador."""

from app.observability.correlation import (
    CORRELATION_HEADER,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.event_log import BridgeEvent, EventLog
from app.observability.metrics import record_delivery, record_latency, record_transition

__all__ = [
    "CORRELATION_HEADER",
    "BridgeEvent",
    "EventLog",
    "generate_correlation_id",
    "get_correlation_id",
    "record_delivery",
    "record_latency",
    "record_transition",
    "reset_correlation_id",
    "set_correlation_id",
]
