"""Rotas HTTP: health/ (probes) e bridge/ (sessão e envio)."""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
