"""Formatters: JSON para produção, texto para terminal/testes."""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

# Presentes em toda linha JSON, mesmo sem `extra`
REQUIRED_LOG_FIELDS = frozenset(
    {"asctime", "levelname", "name", "message", "correlation_id", "service"}
)

FIELD_RENAME_MAP = {"levelname": "level", "name": "logger"}

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(service)s %(name)s: %(message)s"


def create_json_formatter() -> JsonFormatter:
    """JSON com os campos obrigatórios + tudo que vier em `extra`.

    Linha típica:
        {"asctime": "...", "correlation_id": "", "level": "INFO",
         "logger": "app.sessions.state_machine", "message": "bridge_state_changed",
         "service": "whatsapp_bridge", "to_state": "READY", ...}
    """
    fields = " ".join(f"%({name})s" for name in sorted(REQUIRED_LOG_FIELDS))
    return JsonFormatter(fields, rename_fields=FIELD_RENAME_MAP)


def create_text_formatter() -> logging.Formatter:
    # Campos de `extra` não aparecem neste formato
    return logging.Formatter(TEXT_FORMAT)
