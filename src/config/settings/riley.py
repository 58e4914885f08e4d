"""Settings de negócio do Riley (empresa, persona, horário de atendimento).

Substitui o objeto de settings sem schema do sistema antigo por campos
tipados com defaults documentados. Tudo que o contexto do seletor e o
prompt do colaborador generativo consomem está aqui.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from functools import lru_cache

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

DEFAULT_AFTER_HOURS_MESSAGE = (
    "Thanks for reaching out! We are currently closed, but we wanted to confirm "
    "we received your message. We'll get back to you as soon as possible after "
    "we open at [[Next Open Time]]."
)


@dataclass(frozen=True, slots=True)
class DayHours:
    """Janela de atendimento de um dia da semana (HH:MM, 24h)."""

    open: bool = True
    open_time: str = "08:00"
    close_time: str = "18:00"


def _default_week() -> dict[str, DayHours]:
    week = {day: DayHours() for day in WEEKDAYS}
    week["saturday"] = DayHours(open=True, open_time="09:00", close_time="16:00")
    week["sunday"] = DayHours(open=False)
    return week


@dataclass(frozen=True)
class RileySettings:
    """Configurações de negócio.

    Attributes:
        company_name: Nome da empresa (prompt, saudação padrão, after-hours)
        personality: Instrução de tom para o colaborador generativo
        company_details: Dados livres da empresa injetados no prompt
        negative_filters: Frases que o colaborador generativo deve evitar
        after_hours_enabled: Responde com mensagem de fora do horário
        after_hours_message: Template com [[Next Open Time]], [[Company Name]],
            [[Customer Name]]
        timezone: Timezone IANA do horário de atendimento
        business_hours: Janela por dia da semana
    """

    company_name: str = "Panda Exteriors"
    personality: str = "Be professional, friendly, and helpful."
    company_details: dict[str, str] = field(default_factory=dict)
    negative_filters: tuple[str, ...] = ()
    after_hours_enabled: bool = False
    after_hours_message: str = DEFAULT_AFTER_HOURS_MESSAGE
    timezone: str = "America/New_York"
    business_hours: dict[str, DayHours] = field(default_factory=_default_week)

    def validate(self) -> list[str]:
        """Valida configurações de negócio."""
        errors: list[str] = []

        if not self.company_name:
            errors.append("RILEY_COMPANY_NAME não pode ser vazio")

        unknown_days = set(self.business_hours) - set(WEEKDAYS)
        if unknown_days:
            errors.append(f"RILEY_BUSINESS_HOURS com dias inválidos: {sorted(unknown_days)}")

        for day, hours in self.business_hours.items():
            if hours.open and hours.open_time >= hours.close_time:
                errors.append(f"RILEY_BUSINESS_HOURS[{day}]: open_time >= close_time")

        return errors


def _parse_business_hours(raw: str) -> dict[str, DayHours]:
    """Converte JSON `{"monday": {"open": true, "openTime": "08:00", ...}}`."""
    week = _default_week()
    if not raw:
        return week
    data = json.loads(raw)
    for day, value in data.items():
        if not isinstance(value, dict):
            continue
        week[day.lower()] = DayHours(
            open=bool(value.get("open", True)),
            open_time=str(value.get("openTime", "08:00")),
            close_time=str(value.get("closeTime", "18:00")),
        )
    return week


def _load_riley_from_env() -> RileySettings:
    """Carrega RileySettings de variáveis de ambiente."""
    filters_raw = os.getenv("RILEY_NEGATIVE_FILTERS", "")
    details_raw = os.getenv("RILEY_COMPANY_DETAILS", "")
    return RileySettings(
        company_name=os.getenv("RILEY_COMPANY_NAME", "Panda Exteriors"),
        personality=os.getenv("RILEY_PERSONALITY", "Be professional, friendly, and helpful."),
        company_details=json.loads(details_raw) if details_raw else {},
        negative_filters=tuple(
            item.strip() for item in filters_raw.split("|") if item.strip()
        ),
        after_hours_enabled=os.getenv("RILEY_AFTER_HOURS_ENABLED", "false").lower()
        in ("true", "1", "yes"),
        after_hours_message=os.getenv("RILEY_AFTER_HOURS_MESSAGE", DEFAULT_AFTER_HOURS_MESSAGE),
        timezone=os.getenv("RILEY_TIMEZONE", "America/New_York"),
        business_hours=_parse_business_hours(os.getenv("RILEY_BUSINESS_HOURS", "")),
    )


@lru_cache(maxsize=1)
def get_riley_settings() -> RileySettings:
    """Retorna instância cacheada de RileySettings."""
    return _load_riley_from_env()
