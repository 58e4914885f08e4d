"""Horário de atendimento e mensagem de fora do horário.

Regras puras sobre RileySettings; o instante atual é sempre recebido
como parâmetro (timezone-aware) para permitir testes determinísticos.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from config.settings.riley import WEEKDAYS

if TYPE_CHECKING:
    from config.settings.riley import DayHours, RileySettings

NEXT_OPEN_UNKNOWN = "our next business day"


def format_time(time_24h: str) -> str:
    """Converte "HH:MM" para "H:MM AM/PM".

    >>> format_time("08:00")
    '8:00 AM'
    >>> format_time("13:30")
    '1:30 PM'
    """
    hours, _, minutes = time_24h.partition(":")
    hour = int(hours)
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minutes} {suffix}"


class BusinessHours:
    """Avalia a janela de atendimento configurada."""

    def __init__(self, settings: RileySettings) -> None:
        self._settings = settings
        self._tz = ZoneInfo(settings.timezone)

    def _local(self, now: datetime | None) -> datetime:
        return (now or datetime.now(UTC)).astimezone(self._tz)

    def _hours_for(self, weekday: int) -> DayHours | None:
        return self._settings.business_hours.get(WEEKDAYS[weekday])

    def is_open(self, now: datetime | None = None) -> bool:
        """True se `now` está dentro da janela do dia (fechamento exclusivo)."""
        local = self._local(now)
        hours = self._hours_for(local.weekday())
        if hours is None or not hours.open:
            return False
        current = local.strftime("%H:%M")
        return hours.open_time <= current < hours.close_time

    def next_open_time(self, now: datetime | None = None) -> str:
        """Descrição legível da próxima abertura.

        Hoje antes da abertura: "today at 8:00 AM"; outro dia da semana:
        "Monday at 8:00 AM"; sem dia aberto: "our next business day".
        """
        local = self._local(now)
        current = local.strftime("%H:%M")
        for offset in range(7):
            weekday = (local.weekday() + offset) % 7
            hours = self._hours_for(weekday)
            if hours is None or not hours.open:
                continue
            if offset == 0:
                if current < hours.open_time:
                    return f"today at {format_time(hours.open_time)}"
                continue
            return f"{WEEKDAYS[weekday].capitalize()} at {format_time(hours.open_time)}"
        return NEXT_OPEN_UNKNOWN

    def after_hours_message(
        self,
        customer_name: str = "",
        now: datetime | None = None,
    ) -> str | None:
        """Mensagem de fora do horário com variáveis substituídas.

        Retorna None quando a resposta automática está desabilitada.
        """
        if not self._settings.after_hours_enabled:
            return None
        return (
            self._settings.after_hours_message.replace(
                "[[Next Open Time]]", self.next_open_time(now)
            )
            .replace("[[Company Name]]", self._settings.company_name)
            .replace("[[Customer Name]]", customer_name)
        )

    def should_send_after_hours(self, now: datetime | None = None) -> bool:
        return self._settings.after_hours_enabled and not self.is_open(now)
