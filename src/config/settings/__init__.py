"""Agregador de settings da ponte WhatsApp.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
)

# Bridge settings
from config.settings.bridge import (
    DEFAULT_ADDRESS_SUFFIX,
    DEFAULT_COUNTRY_CODE,
    DEFAULT_LOCAL_PREFIX,
    BridgeSettings,
    ReconnectPolicy,
    get_bridge_settings,
)

__all__ = [
    # Constants
    "DEFAULT_ADDRESS_SUFFIX",
    "DEFAULT_COUNTRY_CODE",
    "DEFAULT_LOCAL_PREFIX",
    # Base
    "BaseSettings",
    # Bridge
    "BridgeSettings",
    "Environment",
    "ReconnectPolicy",
    "get_base_settings",
    "get_bridge_settings",
]
