"""Normalização de destinatários (telefone → endereço da plataforma).

Função pura e total: qualquer entrada gera um endereço sintaticamente
válido. Se o número existe de fato só é descoberto no envio, pelo
cliente de mensagens.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from config.settings.bridge import (
    DEFAULT_ADDRESS_SUFFIX,
    DEFAULT_COUNTRY_CODE,
    DEFAULT_LOCAL_PREFIX,
)

_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True, slots=True)
class RecipientAddress:
    """Endereço canônico de usuário na plataforma.

    Attributes:
        user: Número internacional apenas com dígitos (pode ser vazio)
        suffix: Sufixo de usuário da plataforma (ex: "@c.us")
    """

    user: str
    suffix: str = DEFAULT_ADDRESS_SUFFIX

    @property
    def jid(self) -> str:
        """Identificador completo aceito pelo cliente (ex: 9647...@c.us)."""
        return f"{self.user}{self.suffix}"

    @property
    def masked(self) -> str:
        """Versão segura para logs (apenas os 4 últimos dígitos)."""
        return f"***{self.user[-4:]}{self.suffix}"

    def __str__(self) -> str:
        return self.jid


def normalize(
    raw: str | RecipientAddress | None,
    *,
    country_code: str = DEFAULT_COUNTRY_CODE,
    local_prefix: str = DEFAULT_LOCAL_PREFIX,
    suffix: str = DEFAULT_ADDRESS_SUFFIX,
) -> RecipientAddress:
    """Converte um telefone bruto no endereço canônico da plataforma.

    Regras:
        1. Remove todo caractere que não é dígito decimal
           (inclusive um sufixo já presente, que é reposto no passo 3).
        2. Número local (começa com `local_prefix`, ex: "07") tem o prefixo
           inteiro trocado pelo código do país: 0771234567 → 9641234567.
           Números já internacionais passam sem alteração.
        3. Acrescenta o sufixo de usuário da plataforma.

    Aceita a própria saída: normalize(normalize(x)) == normalize(x).

    Args:
        raw: Telefone em qualquer formato ("+964 770...", "0770-...", ""),
            ou um RecipientAddress já normalizado
        country_code: Código do país para números locais
        local_prefix: Prefixo que identifica número local
        suffix: Sufixo de usuário da plataforma

    Returns:
        RecipientAddress (nunca levanta exceção)
    """
    digits = _NON_DIGITS.sub("", "" if raw is None else str(raw))

    if local_prefix and digits.startswith(local_prefix):
        digits = country_code + digits[len(local_prefix):]

    return RecipientAddress(user=digits, suffix=suffix)
