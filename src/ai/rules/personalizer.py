"""Personalização de templates com dados do contato.

Substituição literal (`str.replace`) de placeholders conhecidos, todas as
ocorrências. Sem regex e sem `str.format`: chaves que não são placeholders
conhecidos ficam intactas e nunca levantam exceção.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ai.rules.response_selector import DEFAULT_COMPANY_NAME

if TYPE_CHECKING:
    from ai.models.caller_context import CallerContext

# placeholder → (atributo do CallerContext, valor default)
PLACEHOLDER_DEFAULTS: tuple[tuple[str, str, str], ...] = (
    ("{customer_name}", "customer_name", "there"),
    ("{service_type}", "service_type", "home exterior"),
    ("{date}", "appointment_date", "TBD"),
    ("{time}", "appointment_time", "TBD"),
    ("{specialist_name}", "specialist_name", "our specialist"),
    ("{address}", "address", "your property"),
    ("{eta_minutes}", "eta_minutes", "30"),
)
COMPANY_PLACEHOLDER = "{company_name}"


def personalize_response(
    template: str,
    context: CallerContext,
    *,
    company_name: str = DEFAULT_COMPANY_NAME,
) -> str:
    """Preenche os placeholders do template.

    Valores ausentes (None ou string vazia) usam o default. `{company_name}`
    vem da configuração, não do contato. Placeholders desconhecidos são
    mantidos literalmente.

    Idempotente desde que nenhum valor substituído contenha um placeholder
    conhecido.
    """
    result = template or ""
    for placeholder, attribute, default in PLACEHOLDER_DEFAULTS:
        if placeholder not in result:
            continue
        value = getattr(context, attribute, None)
        result = result.replace(placeholder, str(value) if value else default)
    return result.replace(COMPANY_PLACEHOLDER, company_name or DEFAULT_COMPANY_NAME)
