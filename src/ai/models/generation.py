"""Contratos do colaborador generativo (LLM).

Conforme contrato externo: `generate(prompt, context)` e
`classify_intent(text)`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

HistoryRole = Literal["user", "assistant"]


@dataclass(frozen=True, slots=True)
class HistoryTurn:
    """Turno do histórico recente enviado ao LLM."""

    role: HistoryRole
    content: str


@dataclass(frozen=True, slots=True)
class GenerationContext:
    """Contexto de geração.

    Atributos:
        company_name: Nome da empresa no prompt de sistema
        personality: Instrução de tom
        company_details: Dados livres da empresa
        negative_filters: Frases a evitar
        thread_history: Turnos recentes (mais antigos primeiro)
        analysis: Análise da mensagem corrente (dict serializado)
    """

    company_name: str = "Panda Exteriors"
    personality: str = "Be professional, friendly, and helpful."
    company_details: dict[str, str] = field(default_factory=dict)
    negative_filters: tuple[str, ...] = ()
    thread_history: tuple[HistoryTurn, ...] = ()
    analysis: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class IntentClassification:
    """Classificação best-effort feita pelo LLM."""

    intent: str = "other"
    sentiment: str = "neutral"
    urgency: str = "medium"
    suggested_action: str = "Provide general assistance"
    fallback: bool = False
