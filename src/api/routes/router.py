"""Router raiz: junta health e ponte, ambos sem prefixo."""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.bridge.router import router as bridge_router
from api.routes.health.router import router as health_router


def create_api_router() -> APIRouter:
    root = APIRouter()
    root.include_router(health_router, tags=["health"])
    # /status, /qr, /init, /send, /logout, /logs
    root.include_router(bridge_router, tags=["bridge"])
    return root
