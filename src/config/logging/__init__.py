"""Logging estruturado (JSON via python-json-logger)."""

from config.logging.config import (
    DEFAULT_SERVICE_NAME,
    PROPAGATED_LOGGERS,
    configure_logging,
    get_logger,
    log_fallback,
)
from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
    create_text_formatter,
)

__all__ = [
    "DEFAULT_SERVICE_NAME",
    "FIELD_RENAME_MAP",
    "PROPAGATED_LOGGERS",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "configure_logging",
    "create_json_formatter",
    "create_text_formatter",
    "get_logger",
    "log_fallback",
]
