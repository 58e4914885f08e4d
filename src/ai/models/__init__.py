"""Modelos/DTOs para IA.

Re-exporta contratos de entrada/saída do analisador, seletor e do
colaborador generativo.
"""

from ai.models.analysis import Intent, MessageAnalysis, Sentiment, Service, Urgency
from ai.models.caller_context import CallerContext
from ai.models.generation import GenerationContext, HistoryTurn, IntentClassification
from ai.models.response_selection import SelectedResponse, TemplateRef

__all__ = [
    "CallerContext",
    "GenerationContext",
    "HistoryTurn",
    "Intent",
    "IntentClassification",
    "MessageAnalysis",
    "SelectedResponse",
    "Sentiment",
    "Service",
    "TemplateRef",
    "Urgency",
]
