"""Exceções de domínio da ponte WhatsApp.

Cada tipo carrega um `code` estável (usado em logs e no snapshot de sessão)
e o `http_status` que a camada HTTP deve devolver.
"""

from __future__ import annotations


class BridgeError(RuntimeError):
    """Base para falhas da ponte de mensagens."""

    code: str = "BRIDGE_ERROR"
    http_status: int = 500

    def to_dict(self) -> dict[str, str]:
        """Representação segura para logs e respostas (sem PII)."""
        return {"code": self.code, "message": str(self)}


class NotConnectedError(BridgeError):
    """Envio tentado fora do estado READY."""

    code = "NOT_CONNECTED"
    http_status = 503


class InvalidArgumentError(BridgeError):
    """Destinatário ou corpo da mensagem ausente/vazio."""

    code = "INVALID_ARGUMENT"
    http_status = 400


class DeliveryFailedError(BridgeError):
    """O cliente de mensagens falhou ao enviar (rede, desconexão, recusa)."""

    code = "DELIVERY_FAILED"
    http_status = 500


class PairingFailedError(BridgeError):
    """O cliente reportou falha de autenticação/pareamento."""

    code = "PAIRING_FAILED"


class InitTimeoutError(BridgeError):
    """O guard de inatividade expirou antes da autenticação."""

    code = "INIT_TIMEOUT"
