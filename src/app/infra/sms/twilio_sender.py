"""Envio outbound de SMS via Twilio REST API.

O SDK do Twilio é síncrono: cada envio roda em `asyncio.to_thread`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from twilio.base.exceptions import TwilioRestException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client as TwilioClient

from config.logging import mask_participant
from utils.errors import DeliveryError

if TYPE_CHECKING:
    from config.settings.sms import TwilioSettings

logger = logging.getLogger(__name__)


def create_twilio_client(settings: TwilioSettings) -> TwilioClient:
    """Cria cliente Twilio com timeout de requisição."""
    return TwilioClient(
        settings.account_sid,
        settings.auth_token,
        http_client=TwilioHttpClient(timeout=settings.request_timeout_seconds),
    )


class TwilioSmsSender:
    """Implementa DeliverySenderProtocol para o canal SMS.

    Args:
        client: Cliente Twilio REST
        from_number: Número de origem (E.164)
    """

    def __init__(self, client: TwilioClient, from_number: str) -> None:
        self._client = client
        self._from_number = from_number

    async def send(self, destination: str, body: str, conversation_id: str) -> str | None:
        """Envia SMS e retorna o SID da mensagem.

        Raises:
            DeliveryError: Erro da API do Twilio
        """
        try:
            message = await asyncio.to_thread(
                self._client.messages.create,
                to=destination,
                from_=self._from_number,
                body=body,
            )
        except TwilioRestException as exc:
            logger.warning(
                "twilio_send_failed",
                extra={
                    "conversation_id": conversation_id,
                    "participant_id": mask_participant(destination),
                    "twilio_code": exc.code,
                    "status_code": exc.status,
                },
            )
            raise DeliveryError(f"Twilio error {exc.code}: {exc.msg}") from exc

        logger.info(
            "twilio_message_sent",
            extra={"conversation_id": conversation_id, "message_sid": message.sid},
        )
        return message.sid
