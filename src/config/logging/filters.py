"""Filters de logging: injeção de contexto e mascaramento de PII.

- CorrelationIdFilter: adiciona correlation_id e service a cada record.
- ParticipantMaskingFilter: mascara `participant_id` passado via `extra`
  (telefone/email do contato nunca vai em claro para os logs).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


def mask_participant(participant_id: str) -> str:
    """Mascara telefone/email mantendo apenas os 4 últimos caracteres.

    >>> mask_participant("+15551234567")
    '***4567'
    """
    value = (participant_id or "").strip()
    if not value:
        return ""
    if "@" in value:
        local, _, domain = value.partition("@")
        return f"{local[:1]}***@{domain}"
    return f"***{value[-4:]}"


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Se correlation_id já veio via `extra`, o valor explícito é preservado.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class ParticipantMaskingFilter(logging.Filter):
    """Substitui `participant_id` do record pela versão mascarada."""

    def filter(self, record: logging.LogRecord) -> bool:
        participant_id = getattr(record, "participant_id", None)
        if isinstance(participant_id, str):
            record.participant_id = mask_participant(participant_id)
        return True
