"""Contexto do chamador consumido pelo seletor e pelo personalizador."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CallerContext:
    """Dados do contato para seleção e personalização de resposta.

    Os três booleanos dirigem o seletor; os demais campos preenchem
    placeholders do template (None = usa o default documentado).
    """

    has_appointment: bool = False
    has_recent_inspection: bool = False
    has_quote: bool = False
    customer_name: str | None = None
    service_type: str | None = None
    appointment_date: str | None = None
    appointment_time: str | None = None
    specialist_name: str | None = None
    address: str | None = None
    eta_minutes: str | None = None
