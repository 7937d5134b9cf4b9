"""Modelos de request/response dos endpoints da ponte."""

from __future__ import annotations

from pydantic import BaseModel


class SendMessageRequest(BaseModel):
    """Corpo do POST /send.

    Campos vazios são aceitos aqui e rejeitados pelo SessionManager
    (InvalidArgument), que é a fonte única dessa regra.
    """

    phone: str = ""
    message: str = ""


class SendMessageResponse(BaseModel):
    success: bool = True
    id: str


class CommandResponse(BaseModel):
    """Confirmação de comandos (init/logout)."""

    message: str
    state: str

