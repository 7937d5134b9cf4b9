"""Endpoints da ponte WhatsApp: status, pareamento, envio e logout.

Camada fina sobre o SessionManager guardado em `app.state.session_manager`.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.routes.bridge.schemas import CommandResponse, SendMessageRequest, SendMessageResponse
from fsm import BridgeState
from utils.errors import BridgeError, DeliveryFailedError

if TYPE_CHECKING:
    from app.sessions.manager import SessionManager

logger = logging.getLogger(__name__)

router = APIRouter()

# Eventos recentes incluídos no /status
STATUS_EVENTS_PREVIEW = 5


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def _error_response(exc: BridgeError) -> JSONResponse:
    payload: dict[str, Any] = {"success": False, "error": str(exc), "code": exc.code}
    if isinstance(exc, DeliveryFailedError) and exc.__cause__ is not None:
        payload["details"] = str(exc.__cause__)
    return JSONResponse(content=payload, status_code=exc.http_status)


@router.get("/status")
async def get_status(request: Request) -> dict[str, Any]:
    """Snapshot da sessão para polling do operador."""
    manager = _get_manager(request)
    payload = manager.describe().to_dict()
    payload["timestamp"] = datetime.now(UTC).isoformat()
    payload["logs"] = [e.to_dict() for e in manager.recent_events(STATUS_EVENTS_PREVIEW)]
    return payload


@router.get("/qr")
async def get_qr(request: Request) -> dict[str, Any]:
    """Código de pareamento; inicia a sessão sob demanda se desconectada."""
    manager = _get_manager(request)
    if manager.state == BridgeState.DISCONNECTED:
        await manager.start()
    return manager.get_pairing_info().to_dict()


@router.post("/init", response_model=CommandResponse)
async def init_session(request: Request) -> CommandResponse:
    """Solicita o início do pareamento (idempotente)."""
    snapshot = await _get_manager(request).start()
    return CommandResponse(message="Initialization requested", state=snapshot.state.value)


@router.post("/send", response_model=SendMessageResponse)
async def send_message(
    payload: SendMessageRequest,
    request: Request,
) -> SendMessageResponse | JSONResponse:
    """Envia mensagem de texto; erros mapeados por tipo de BridgeError."""
    try:
        receipt = await _get_manager(request).send(payload.phone, payload.message)
    except BridgeError as exc:
        logger.info("send_request_failed", extra={"code": exc.code})
        return _error_response(exc)
    return SendMessageResponse(id=receipt.message_id)


@router.post("/logout", response_model=CommandResponse)
async def logout(request: Request) -> CommandResponse:
    """Encerra a sessão (sempre termina em DISCONNECTED)."""
    snapshot = await _get_manager(request).logout()
    return CommandResponse(message="Logged out successfully", state=snapshot.state.value)


@router.get("/logs")
async def get_logs(request: Request) -> list[dict[str, str]]:
    """Eventos recentes da ponte, mais recentes primeiro."""
    return [e.to_dict() for e in _get_manager(request).recent_events()]
