"""Sessão da ponte, wiring e infraestrutura.

Subpastas:
- bootstrap/: composition root (logging, settings, singleton da sessão)
- domain/: regras puras (normalização de destinatários)
- sessions/: máquina de estados, guard de inatividade, façade e supervisor
- infra/: implementações concretas de IO (cliente de mensagens)
- protocols/: contratos/interfaces dos colaboradores externos
- observability/: logs estruturados, correlation_id, métricas, eventos
"""
