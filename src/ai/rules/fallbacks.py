"""Fallbacks determinísticos para quando o LLM falha.

Garante resposta previsível e segura quando a IA não está disponível:
a resposta passa a vir da cadeia de regras + personalização.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ai.models.generation import IntentClassification
from ai.models.response_selection import SelectedResponse
from ai.rules.personalizer import personalize_response
from ai.rules.response_selector import DEFAULT_COMPANY_NAME, select_response

if TYPE_CHECKING:
    from ai.config.template_loader import ResponseTemplateTable
    from ai.models.analysis import MessageAnalysis
    from ai.models.caller_context import CallerContext

# Resposta do canal SMS quando o processamento falha
SMS_APOLOGY_MESSAGE = "Sorry, I'm having technical difficulties. Please try again later."


def fallback_intent_classification() -> IntentClassification:
    """Classificação padrão quando o JSON do LLM não pôde ser lido.

    Returns:
        IntentClassification default com fallback=True
    """
    return IntentClassification(fallback=True)


def rule_based_reply(
    analysis: MessageAnalysis,
    context: CallerContext,
    templates: ResponseTemplateTable,
    *,
    company_name: str = DEFAULT_COMPANY_NAME,
) -> SelectedResponse:
    """Seleciona e personaliza a resposta só com regras.

    Returns:
        SelectedResponse cujo `text` já está personalizado.
    """
    selected = select_response(analysis, context, templates, company_name=company_name)
    return SelectedResponse(
        rule=selected.rule,
        text=personalize_response(selected.text, context, company_name=company_name),
        template_ref=selected.template_ref,
    )
