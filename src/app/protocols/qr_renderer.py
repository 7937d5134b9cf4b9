"""Protocolo de renderização do código de pareamento em imagem."""

from __future__ import annotations

from typing import Protocol


class QrRendererProtocol(Protocol):
    """Converte o código bruto em imagem exibível (ex: data URL PNG)."""

    def render(self, code: str) -> str: ...
