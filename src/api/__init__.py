"""Borda HTTP da ponte.

Só traduz HTTP ⇄ SessionManager: valida payloads com pydantic e mapeia
BridgeError para status. Regras de sessão ficam em app.sessions.
"""
