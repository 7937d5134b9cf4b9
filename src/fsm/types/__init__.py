"""Registros de transição (aceita/rejeitada)."""

from fsm.types.transition import StateTransition, TransitionResult

__all__ = ["StateTransition", "TransitionResult"]
