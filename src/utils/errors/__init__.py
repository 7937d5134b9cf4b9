"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    BridgeError,
    DeliveryFailedError,
    InitTimeoutError,
    InvalidArgumentError,
    NotConnectedError,
    PairingFailedError,
)

__all__ = [
    "BridgeError",
    "DeliveryFailedError",
    "InitTimeoutError",
    "InvalidArgumentError",
    "NotConnectedError",
    "PairingFailedError",
]
