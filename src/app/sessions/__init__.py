"""Módulo da sessão da ponte.

Exporta a façade, a máquina de estados, o guard de inatividade,
o supervisor de reconexão e os modelos de leitura.
"""

from app.sessions.idle_guard import IdleTimeoutGuard
from app.sessions.manager import DEFAULT_SESSION_ID, SessionManager
from app.sessions.models import BridgeSession, PairingInfo, SessionSnapshot
from app.sessions.state_machine import SessionStateMachine
from app.sessions.supervisor import ReconnectSupervisor

__all__ = [
    "DEFAULT_SESSION_ID",
    "BridgeSession",
    "IdleTimeoutGuard",
    "PairingInfo",
    "ReconnectSupervisor",
    "SessionManager",
    "SessionSnapshot",
    "SessionStateMachine",
]
