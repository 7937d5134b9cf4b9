"""Protocolos e contratos do core da aplicação."""

from .messaging_client import DeliveryReceipt, MessagingClientProtocol
from .qr_renderer import QrRendererProtocol

__all__ = [
    "DeliveryReceipt",
    "MessagingClientProtocol",
    "QrRendererProtocol",
]
