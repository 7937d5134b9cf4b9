"""Settings da ponte WhatsApp (sessão, pareamento e envio).

Timeouts do ciclo de vida, normalização de destinatários,
política de reconexão e seleção do cliente de mensagens.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

ReconnectPolicy = Literal["never", "on_disconnect"]

# Constantes de endereçamento (Iraque, cliente whatsapp-web)
DEFAULT_COUNTRY_CODE: str = "964"
DEFAULT_LOCAL_PREFIX: str = "07"
DEFAULT_ADDRESS_SUFFIX: str = "@c.us"


@dataclass(frozen=True)
class BridgeSettings:
    """Configurações da ponte de mensagens.

    Attributes:
        idle_timeout_seconds: Tempo máximo em INITIALIZING/AWAITING_PAIRING
        send_timeout_seconds: Timeout de cada envio delegado ao cliente
        logout_timeout_seconds: Timeout de logout/teardown do cliente
        country_code: Código do país usado na reescrita de números locais
        local_prefix: Prefixo de tronco que identifica número local
        address_suffix: Sufixo de endereço de usuário da plataforma
        auto_start: Inicia o pareamento no boot (False = start sob demanda)
        event_log_size: Capacidade do log de eventos recentes
        client_factory: Caminho "modulo:callable" do cliente real
        reconnect_policy: Política do supervisor de reconexão
        reconnect_delay_seconds: Espera antes de cada reconexão
        reconnect_max_attempts: Tentativas consecutivas antes de desistir
    """

    # Ciclo de vida
    idle_timeout_seconds: float = 180.0
    send_timeout_seconds: float = 30.0
    logout_timeout_seconds: float = 15.0
    auto_start: bool = False

    # Endereçamento
    country_code: str = DEFAULT_COUNTRY_CODE
    local_prefix: str = DEFAULT_LOCAL_PREFIX
    address_suffix: str = DEFAULT_ADDRESS_SUFFIX

    # Observabilidade
    event_log_size: int = 50

    # Cliente de mensagens
    client_factory: str = ""

    # Reconexão (política externa à máquina de estados)
    reconnect_policy: ReconnectPolicy = "never"
    reconnect_delay_seconds: float = 3.0
    reconnect_max_attempts: int = 5

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações da ponte.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if self.idle_timeout_seconds <= 0:
            errors.append("BRIDGE_IDLE_TIMEOUT_SECONDS deve ser > 0")

        if self.send_timeout_seconds <= 0:
            errors.append("BRIDGE_SEND_TIMEOUT_SECONDS deve ser > 0")

        if self.logout_timeout_seconds <= 0:
            errors.append("BRIDGE_LOGOUT_TIMEOUT_SECONDS deve ser > 0")

        if not self.country_code.isdigit():
            errors.append("BRIDGE_COUNTRY_CODE deve conter apenas dígitos")

        if not self.local_prefix.isdigit():
            errors.append("BRIDGE_LOCAL_PREFIX deve conter apenas dígitos")

        if not self.address_suffix.startswith("@"):
            errors.append("BRIDGE_ADDRESS_SUFFIX deve começar com '@'")

        if self.event_log_size < 1:
            errors.append("BRIDGE_EVENT_LOG_SIZE deve ser >= 1")

        if self.client_factory and ":" not in self.client_factory:
            errors.append("BRIDGE_CLIENT_FACTORY deve usar o formato 'modulo:callable'")

        if not self.client_factory and not base.is_development:
            errors.append(
                "Cliente em memória proibido em staging/production. "
                "Configure BRIDGE_CLIENT_FACTORY."
            )

        if self.reconnect_policy not in ("never", "on_disconnect"):
            errors.append(f"BRIDGE_RECONNECT_POLICY inválido: {self.reconnect_policy}")

        if self.reconnect_delay_seconds < 0:
            errors.append("BRIDGE_RECONNECT_DELAY_SECONDS deve ser >= 0")

        if self.reconnect_max_attempts < 1:
            errors.append("BRIDGE_RECONNECT_MAX_ATTEMPTS deve ser >= 1")

        return errors


def _load_bridge_from_env() -> BridgeSettings:
    """Carrega BridgeSettings de variáveis de ambiente."""
    policy_str = os.getenv("BRIDGE_RECONNECT_POLICY", "never").lower()
    policy: ReconnectPolicy = (
        "on_disconnect" if policy_str == "on_disconnect" else "never"
    )
    return BridgeSettings(
        idle_timeout_seconds=float(os.getenv("BRIDGE_IDLE_TIMEOUT_SECONDS", "180")),
        send_timeout_seconds=float(os.getenv("BRIDGE_SEND_TIMEOUT_SECONDS", "30")),
        logout_timeout_seconds=float(os.getenv("BRIDGE_LOGOUT_TIMEOUT_SECONDS", "15")),
        auto_start=os.getenv("BRIDGE_AUTO_START", "").lower() in ("true", "1", "yes"),
        country_code=os.getenv("BRIDGE_COUNTRY_CODE", DEFAULT_COUNTRY_CODE),
        local_prefix=os.getenv("BRIDGE_LOCAL_PREFIX", DEFAULT_LOCAL_PREFIX),
        address_suffix=os.getenv("BRIDGE_ADDRESS_SUFFIX", DEFAULT_ADDRESS_SUFFIX),
        event_log_size=int(os.getenv("BRIDGE_EVENT_LOG_SIZE", "50")),
        client_factory=os.getenv("BRIDGE_CLIENT_FACTORY", ""),
        reconnect_policy=policy,
        reconnect_delay_seconds=float(os.getenv("BRIDGE_RECONNECT_DELAY_SECONDS", "3")),
        reconnect_max_attempts=int(os.getenv("BRIDGE_RECONNECT_MAX_ATTEMPTS", "5")),
    )


@lru_cache(maxsize=1)
def get_bridge_settings() -> BridgeSettings:
    """Retorna instância cacheada de BridgeSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_bridge_from_env()
