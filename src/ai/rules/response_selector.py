"""Seleção de resposta por regras (sem LLM).

Cadeia explícita de regras `(nome, predicado, desfecho)` avaliada em ordem;
a primeira regra aplicável vence. A ordem é parte do contrato: urgência
alta vence qualquer intenção; follow-up sem inspeção/orçamento cai para a
saudação padrão.

Desfechos:
    - template da tabela (categoria/subcategoria), ainda com placeholders;
    - literal fixo (confirmação, cancelamento, saudação padrão).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ai.config.template_loader import ResponseTemplateTable
from ai.models.analysis import Intent, MessageAnalysis, Sentiment, Service, Urgency
from ai.models.caller_context import CallerContext
from ai.models.response_selection import SelectedResponse, TemplateRef

logger = logging.getLogger(__name__)

STORM_RESPONSE = TemplateRef("special_situations", "storm_response")
APPOINTMENT_CONFIRMATION = TemplateRef("appointment_confirmation", "initial")
LEAD_QUALIFICATION = TemplateRef("lead_qualification", "initial_interest")
PRICE_OBJECTION = TemplateRef("objection_handling", "price_concern")
AFTER_INSPECTION = TemplateRef("follow_up", "after_inspection")
QUOTE_FOLLOW_UP = TemplateRef("follow_up", "quote_follow_up")
SERVICE_SPECIFIC_CATEGORY = "service_specific"
# Serviço usado quando o template específico não existe na tabela
DEFAULT_SERVICE_TEMPLATE = TemplateRef(SERVICE_SPECIFIC_CATEGORY, Service.ROOFING.value)

CONFIRMATION_REPLY = (
    "Great! I've confirmed that for you. You'll receive a confirmation text "
    "shortly with all the details."
)
CANCELLATION_REPLY = (
    "I understand. I've noted your request. If you change your mind or need our "
    "services in the future, we're just a text away. Thank you!"
)
DEFAULT_COMPANY_NAME = "Panda Exteriors"


def default_greeting(company_name: str = DEFAULT_COMPANY_NAME) -> str:
    """Saudação/menu padrão quando nenhuma regra específica se aplica."""
    return (
        f"Hi! I'm Riley from {company_name}. I can help you with roofing, siding, "
        "windows, and gutter services. How can I assist you today?"
    )


@dataclass(frozen=True, slots=True)
class SelectionInput:
    """Entrada imutável compartilhada por todas as regras."""

    analysis: MessageAnalysis
    context: CallerContext
    templates: ResponseTemplateTable
    company_name: str = DEFAULT_COMPANY_NAME


Outcome = Callable[[SelectionInput], "SelectedResponse | None"]


@dataclass(frozen=True, slots=True)
class SelectionRule:
    """Regra da cadeia: predicado + desfecho.

    O desfecho pode retornar None para "cair" para a próxima regra
    (ex.: follow-up sem inspeção recente nem orçamento).
    """

    name: str
    applies: Callable[[SelectionInput], bool]
    outcome: Outcome


def _from_template(rule: str, ref: TemplateRef, data: SelectionInput) -> SelectedResponse:
    text = data.templates.require(ref.category, ref.subcategory)
    return SelectedResponse(rule=rule, text=text, template_ref=ref)


def _emergency(data: SelectionInput) -> SelectedResponse:
    return _from_template("emergency", STORM_RESPONSE, data)


def _appointment(data: SelectionInput) -> SelectedResponse:
    ref = APPOINTMENT_CONFIRMATION if data.context.has_appointment else LEAD_QUALIFICATION
    return _from_template("appointment", ref, data)


def _service_inquiry(data: SelectionInput) -> SelectedResponse | None:
    service = data.analysis.service
    if service is None:
        return None
    ref = TemplateRef(SERVICE_SPECIFIC_CATEGORY, service.value)
    if data.templates.get(ref.category, ref.subcategory) is None:
        # Comportamento herdado: qualquer serviço sem template usa o de roofing
        logger.warning(
            "service_template_fallback",
            extra={"service": service.value, "template": str(DEFAULT_SERVICE_TEMPLATE)},
        )
        ref = DEFAULT_SERVICE_TEMPLATE
    return _from_template("service_inquiry", ref, data)


def _pricing(data: SelectionInput) -> SelectedResponse:
    ref = PRICE_OBJECTION if data.analysis.sentiment is Sentiment.NEGATIVE else LEAD_QUALIFICATION
    return _from_template("pricing", ref, data)


def _followup(data: SelectionInput) -> SelectedResponse | None:
    if data.context.has_recent_inspection:
        return _from_template("followup", AFTER_INSPECTION, data)
    if data.context.has_quote:
        return _from_template("followup", QUOTE_FOLLOW_UP, data)
    return None


def _confirmation(_data: SelectionInput) -> SelectedResponse:
    return SelectedResponse(rule="confirmation", text=CONFIRMATION_REPLY)


def _cancellation(_data: SelectionInput) -> SelectedResponse:
    return SelectedResponse(rule="cancellation", text=CANCELLATION_REPLY)


def _default(data: SelectionInput) -> SelectedResponse:
    return SelectedResponse(rule="default", text=default_greeting(data.company_name))


def _intent_is(intent: Intent) -> Callable[[SelectionInput], bool]:
    return lambda data: data.analysis.intent is intent


SELECTION_RULES: tuple[SelectionRule, ...] = (
    SelectionRule(
        "emergency",
        lambda data: data.analysis.urgency is Urgency.HIGH
        or data.analysis.intent is Intent.EMERGENCY,
        _emergency,
    ),
    SelectionRule("appointment", _intent_is(Intent.APPOINTMENT), _appointment),
    SelectionRule(
        "service_inquiry",
        lambda data: data.analysis.intent is Intent.SERVICE_INQUIRY
        and data.analysis.service is not None,
        _service_inquiry,
    ),
    SelectionRule("pricing", _intent_is(Intent.PRICING), _pricing),
    SelectionRule("followup", _intent_is(Intent.FOLLOWUP), _followup),
    SelectionRule("confirmation", _intent_is(Intent.CONFIRMATION), _confirmation),
    SelectionRule("cancellation", _intent_is(Intent.CANCELLATION), _cancellation),
    SelectionRule("default", lambda _data: True, _default),
)


def select_response(
    analysis: MessageAnalysis,
    context: CallerContext,
    templates: ResponseTemplateTable,
    *,
    company_name: str = DEFAULT_COMPANY_NAME,
) -> SelectedResponse:
    """Escolhe a resposta percorrendo SELECTION_RULES (primeira vence).

    Args:
        analysis: Saída do analisador.
        context: Booleanos e dados do contato.
        templates: Tabela de templates (somente leitura).
        company_name: Nome usado na saudação padrão.

    Returns:
        SelectedResponse com o texto ainda não personalizado.

    Raises:
        TemplateNotFoundError: Tabela sem um template exigido por regra
            (erro de configuração, não de input).
    """
    data = SelectionInput(
        analysis=analysis,
        context=context,
        templates=templates,
        company_name=company_name,
    )
    for rule in SELECTION_RULES:
        if not rule.applies(data):
            continue
        selected = rule.outcome(data)
        if selected is not None:
            return selected
    # Inalcançável: a regra "default" sempre se aplica
    return _default(data)
