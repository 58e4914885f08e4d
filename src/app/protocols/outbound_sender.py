"""Protocolos de envio outbound."""

from __future__ import annotations

from typing import Protocol


class DeliverySenderProtocol(Protocol):
    """Contrato mínimo para entregar uma resposta ao participante.

    Retorna o id do provedor (ex.: SID do Twilio) ou None.
    """

    async def send(
        self,
        destination: str,
        body: str,
        conversation_id: str,
    ) -> str | None: ...
