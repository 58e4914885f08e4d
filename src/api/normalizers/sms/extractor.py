"""Extrator do webhook SMS do Twilio.

Estrutura do form (application/x-www-form-urlencoded):
- MessageSid, From, To, Body
- FromCity, FromState, FromZip (geolocalização do número de origem)

Não faz validação de negócio - apenas extração estrutural.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# Campo do form → chave na metadata da conversa
_METADATA_FIELDS = (
    ("To", "twilio_number"),
    ("FromCity", "from_city"),
    ("FromState", "from_state"),
    ("FromZip", "from_zip"),
)


@dataclass(frozen=True, slots=True)
class InboundSms:
    """SMS recebido, já sem espaços nas bordas.

    Atributos:
        message_sid: Id da mensagem no Twilio (chave de dedupe)
        sender: Número de origem (participantId)
        body: Texto da mensagem
        metadata: Dados do canal gravados na conversa
    """

    message_sid: str
    sender: str
    body: str
    metadata: dict[str, str]

    @property
    def is_complete(self) -> bool:
        return bool(self.sender and self.body)


def _field(form: Mapping[str, Any], name: str) -> str:
    value = form.get(name)
    return value.strip() if isinstance(value, str) else ""


def extract_inbound_sms(form: Mapping[str, Any]) -> InboundSms:
    """Converte o form do webhook em InboundSms (campos ausentes viram "")."""
    metadata = {key: value for name, key in _METADATA_FIELDS if (value := _field(form, name))}
    return InboundSms(
        message_sid=_field(form, "MessageSid"),
        sender=_field(form, "From"),
        body=_field(form, "Body"),
        metadata=metadata,
    )
