"""Composition root da ponte.

Três responsabilidades, chamadas nesta ordem pelo app:
logging (`initialize_app`), checagem de settings
(`validate_runtime_settings`) e a sessão única (`get_session_manager`).
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import get_base_settings, get_bridge_settings

if TYPE_CHECKING:
    from app.sessions.manager import SessionManager

# Ambientes em que settings inválidas impedem o boot
STRICT_VALIDATION_ENVS = frozenset({"staging", "production"})

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name,
        correlation_id_getter=get_correlation_id,
        json_output=not base.debug,
    )


def validate_runtime_settings() -> None:
    """Junta os erros de base + ponte e decide se o boot continua.

    Raises:
        RuntimeError: Há erros e o ambiente está em STRICT_VALIDATION_ENVS.
    """
    base = get_base_settings()
    errors = [f"base: {e}" for e in base.validate()]
    errors += [f"bridge: {e}" for e in get_bridge_settings().validate(base)]

    log_extra: dict[str, object] = {"component": "bootstrap", "environment": base.environment}
    if not errors:
        logger.info("settings_validated", extra=log_extra)
        return

    logger.warning(
        "settings_validation_failed",
        extra={**log_extra, "error_count": len(errors), "errors": errors},
    )
    if base.environment in STRICT_VALIDATION_ENVS:
        details = "\n".join(f"- {e}" for e in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")


@lru_cache(maxsize=1)
def get_session_manager() -> SessionManager:
    """Sessão do processo, criada no primeiro acesso.

    Um número de WhatsApp aceita um único pareamento ativo; por isso
    não existe mais de um SessionManager por processo.
    """
    from app.bootstrap.clients import create_messaging_client
    from app.sessions.manager import SessionManager

    settings = get_bridge_settings()
    return SessionManager(client=create_messaging_client(settings), settings=settings)
