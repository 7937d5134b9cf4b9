"""Probes para o orquestrador de containers.

/health e /wake respondem enquanto o processo estiver de pé; /ready só
responde 200 quando a sessão consegue enviar mensagens (READY).
"""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from config.settings import get_base_settings

API_VERSION = "1.0.0"

router = APIRouter()


def _utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


class HealthResponse(BaseModel):
    status: str
    service: str
    timestamp: str
    version: str = API_VERSION


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        service=get_base_settings().service_name,
        timestamp=_utc_now_iso(),
    )


@router.get("/wake", response_class=PlainTextResponse)
async def wake() -> str:
    # Plataformas que hibernam o container batem aqui para acordá-lo
    return "Server is awake"


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    manager = getattr(request.app.state, "session_manager", None)
    snapshot = manager.describe() if manager is not None else None
    ready = snapshot is not None and snapshot.is_ready

    return JSONResponse(
        content={
            "status": "ready" if ready else "not_ready",
            "session": snapshot.state.value if snapshot is not None else None,
            "timestamp": _utc_now_iso(),
        },
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
