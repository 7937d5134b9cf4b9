"""Factory do cliente de mensagens (colaborador externo).

O cliente real (biblioteca de WhatsApp Web) é plugado via
BRIDGE_CLIENT_FACTORY no formato "modulo:callable"; o callable não recebe
argumentos e devolve um objeto compatível com MessagingClientProtocol.
Sem factory configurada usa o cliente em memória (apenas desenvolvimento).
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

from app.infra.messaging import MemoryMessagingClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.protocols.messaging_client import MessagingClientProtocol
    from config.settings.bridge import BridgeSettings

logger = logging.getLogger(__name__)


def load_client_factory(dotted_path: str) -> Callable[[], MessagingClientProtocol]:
    """Resolve "pacote.modulo:callable" para o callable.

    Raises:
        ValueError: Se o caminho não tiver o formato esperado
        ImportError/AttributeError: Se módulo ou atributo não existirem
    """
    module_name, sep, attr = dotted_path.partition(":")
    if not sep or not module_name or not attr:
        msg = f"BRIDGE_CLIENT_FACTORY inválido: {dotted_path!r}"
        raise ValueError(msg)
    module = importlib.import_module(module_name)
    return getattr(module, attr)


def create_messaging_client(settings: BridgeSettings) -> MessagingClientProtocol:
    """Cria o cliente de mensagens conforme configuração."""
    if not settings.client_factory:
        logger.warning(
            "messaging_client_memory",
            extra={"component": "bootstrap", "backend": "memory"},
        )
        return MemoryMessagingClient()

    factory = load_client_factory(settings.client_factory)
    client = factory()
    logger.info(
        "messaging_client_created",
        extra={"component": "bootstrap", "factory": settings.client_factory},
    )
    return client
