"""Módulo AI do Riley.

Lógica de decisão pura (sem IO de rede):
1. Analisador - intenção, sentimento, urgência e serviço por regras
2. Seletor - cadeia ordenada de regras escolhendo template ou literal
3. Personalizador - preenchimento de placeholders
4. Colaborador generativo - protocolo + mock (implementação real em app/infra/ai)
"""

from ai.config import ResponseTemplateTable, get_template_table
from ai.core import GenerativeResponderProtocol, MockResponder
from ai.models import (
    CallerContext,
    GenerationContext,
    IntentClassification,
    MessageAnalysis,
    SelectedResponse,
)
from ai.rules import (
    analyze_message,
    personalize_response,
    rule_based_reply,
    select_response,
)
from ai.utils import extract_json_from_response

__all__ = [
    "CallerContext",
    "GenerationContext",
    "GenerativeResponderProtocol",
    "IntentClassification",
    "MessageAnalysis",
    "MockResponder",
    "ResponseTemplateTable",
    "SelectedResponse",
    "analyze_message",
    "extract_json_from_response",
    "get_template_table",
    "personalize_response",
    "rule_based_reply",
    "select_response",
]
