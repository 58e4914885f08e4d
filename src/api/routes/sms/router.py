"""Webhook SMS do Twilio: resposta síncrona em TwiML.

Endpoint:
- POST /webhook/sms: form do Twilio (From, To, Body, MessageSid, From*)

Fluxo:
1. Valida X-Twilio-Signature (quando habilitado) → 403
2. Extrai From/Body → 400 com `<Response/>` vazio se ausentes
3. Dedupe por MessageSid (retries do Twilio) → `<Response/>` vazio
4. Processa no orquestrador e devolve `<Response><Message>…</Message></Response>`

Erros internos nunca viram 5xx: o Twilio recebe 200 com pedido de desculpas.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from twilio.twiml.messaging_response import MessagingResponse

from ai.rules import SMS_APOLOGY_MESSAGE
from api.normalizers.sms import extract_inbound_sms
from api.validators.sms import verify_twilio_signature
from app.bootstrap import get_dedupe_store, get_orchestrator, resolve_twilio_settings
from app.domain.conversation import Channel
from app.observability import get_correlation_id
from app.protocols.dedupe import AsyncDedupeProtocol
from app.use_cases.conversations import ConversationOrchestrator
from config.logging import mask_participant
from config.settings import DedupeSettings, TwilioSettings, get_dedupe_settings
from utils.errors import RedisConnectionError

logger = logging.getLogger(__name__)

router = APIRouter()

TWIML_MEDIA_TYPE = "application/xml"
DEDUPE_KEY_PREFIX = "sms:"


def _twiml(message: str | None = None, status_code: int = status.HTTP_200_OK) -> Response:
    twiml = MessagingResponse()
    if message:
        twiml.message(message)
    return Response(content=str(twiml), media_type=TWIML_MEDIA_TYPE, status_code=status_code)


async def _is_retry(dedupe: AsyncDedupeProtocol, message_sid: str, ttl: int) -> bool:
    """Marca o MessageSid; falha do Redis não bloqueia a resposta."""
    if not message_sid:
        return False
    try:
        return await dedupe.seen(f"{DEDUPE_KEY_PREFIX}{message_sid}", ttl)
    except RedisConnectionError:
        logger.warning(
            "sms_dedupe_unavailable",
            extra={"channel": "sms", "correlation_id": get_correlation_id()},
        )
        return False


@router.post("/webhook/sms")
async def receive_sms(
    request: Request,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
    dedupe: AsyncDedupeProtocol = Depends(get_dedupe_store),
    settings: TwilioSettings = Depends(resolve_twilio_settings),
    dedupe_settings: DedupeSettings = Depends(get_dedupe_settings),
) -> Response:
    """Recebe SMS inbound e responde em TwiML."""
    form = await request.form()
    params = {key: value for key, value in form.items() if isinstance(value, str)}

    signature = verify_twilio_signature(
        url=settings.webhook_url,
        params=params,
        headers=request.headers,
        auth_token=settings.auth_token,
        enabled=settings.validate_signature,
    )
    if not signature.valid:
        logger.warning(
            "sms_signature_invalid",
            extra={
                "channel": "sms",
                "correlation_id": get_correlation_id(),
                "error": signature.error,
            },
        )
        return Response(
            content="Forbidden",
            media_type="text/plain",
            status_code=status.HTTP_403_FORBIDDEN,
        )

    sms = extract_inbound_sms(params)
    if not sms.is_complete:
        logger.warning(
            "sms_payload_incomplete",
            extra={
                "channel": "sms",
                "correlation_id": get_correlation_id(),
                "has_from": bool(sms.sender),
                "has_body": bool(sms.body),
            },
        )
        return _twiml(status_code=status.HTTP_400_BAD_REQUEST)

    if await _is_retry(dedupe, sms.message_sid, dedupe_settings.ttl_seconds):
        logger.info(
            "sms_duplicate_ignored",
            extra={"channel": "sms", "message_sid": sms.message_sid},
        )
        return _twiml()

    logger.info(
        "sms_received",
        extra={
            "channel": "sms",
            "correlation_id": get_correlation_id(),
            "participant_id": mask_participant(sms.sender),
            "message_sid": sms.message_sid,
        },
    )

    try:
        result = await orchestrator.handle_inbound(
            sms.sender,
            Channel.SMS,
            sms.body,
            metadata=sms.metadata,
        )
    except Exception:
        logger.exception(
            "sms_processing_failed",
            extra={"channel": "sms", "correlation_id": get_correlation_id()},
        )
        return _twiml(SMS_APOLOGY_MESSAGE)

    return _twiml(result.reply_text)
