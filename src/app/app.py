"""Aplicação ASGI da ponte WhatsApp.

    uvicorn app.app:app --host 0.0.0.0 --port 3000

ou `whatsapp-bridge` (script instalado pelo pacote) para rodar local.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.routes import create_api_router
from app.bootstrap import get_session_manager, initialize_app, validate_runtime_settings
from app.observability import (
    CORRELATION_HEADER,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.sessions.supervisor import ReconnectSupervisor
from config.logging import get_logger
from config.settings import get_base_settings, get_bridge_settings

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from starlette.responses import Response

# Handler do root precisa existir antes dos primeiros logs de import
initialize_app()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Monta a sessão no startup e a desmonta no shutdown.

    O shutdown não faz logout: credenciais salvas pelo cliente continuam
    válidas para o próximo boot.
    """
    validate_runtime_settings()
    settings = get_bridge_settings()
    manager = get_session_manager()
    supervisor = ReconnectSupervisor(manager, settings)
    app.state.session_manager = manager
    app.state.reconnect_supervisor = supervisor
    logger.info(
        "app_started",
        extra={"auto_start": settings.auto_start, "reconnect_policy": settings.reconnect_policy},
    )

    if settings.auto_start:
        await manager.start()

    try:
        yield
    finally:
        logger.info("app_stopping")
        await supervisor.aclose()
        await manager.aclose()


async def correlation_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    token = set_correlation_id(request.headers.get(CORRELATION_HEADER))
    try:
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = get_correlation_id()
    finally:
        reset_correlation_id(token)
    return response


def create_app() -> FastAPI:
    application = FastAPI(
        title="WhatsApp Bridge",
        description="Envio de mensagens WhatsApp com pareamento por QR code",
        version="1.0.0",
        lifespan=lifespan,
    )
    # Painel do operador é servido de outra origem
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.middleware("http")(correlation_middleware)
    application.include_router(create_api_router())
    return application


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run(
        "app.app:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        reload=get_base_settings().debug,
    )


if __name__ == "__main__":
    main()
