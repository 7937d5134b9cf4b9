"""Implementações do cliente de mensagens."""

from app.infra.messaging.memory_client import MemoryMessagingClient

__all__ = ["MemoryMessagingClient"]
