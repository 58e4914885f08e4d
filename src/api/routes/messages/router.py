"""Endpoint síncrono de mensagens (web e integrações).

POST /message → processa a mensagem e devolve a resposta no corpo.

Erros:
- 400 `{error}` nomeando o campo ausente/inválido
- 500 `{error: "Internal server error"}` sem detalhes
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.routes.messages.models import MessageRequest, MessageResponse
from app.bootstrap import get_orchestrator, get_outbound_dispatcher
from app.domain.conversation import Channel
from app.observability import get_correlation_id
from app.use_cases.conversations import (
    ConversationOrchestrator,
    OutboundDispatcher,
    parse_channel,
)
from utils.errors import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()

INTERNAL_ERROR_BODY = {"error": "Internal server error"}


@router.post("/message", response_model=None)
async def post_message(
    payload: MessageRequest,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
    dispatcher: OutboundDispatcher | None = Depends(get_outbound_dispatcher),
) -> JSONResponse:
    """Processa uma mensagem inbound e responde com o texto gerado."""
    try:
        result = await orchestrator.handle_inbound(
            payload.participant_id or "",
            payload.channel,
            payload.text or "",
            conversation_id=payload.conversation_id,
        )
    except ValidationError as exc:
        logger.info(
            "message_request_invalid",
            extra={"field": exc.field, "correlation_id": get_correlation_id()},
        )
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})
    except Exception:
        logger.exception(
            "message_processing_failed", extra={"correlation_id": get_correlation_id()}
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=INTERNAL_ERROR_BODY,
        )

    if payload.deliver and dispatcher is not None and parse_channel(payload.channel) is Channel.SMS:
        dispatcher.dispatch(
            (payload.participant_id or "").strip(),
            result.reply_text,
            result.conversation_id,
        )

    body = MessageResponse(
        conversation_id=result.conversation_id,
        reply_text=result.reply_text,
        timestamp=result.timestamp.isoformat(),
    )
    return JSONResponse(content=body.model_dump(by_alias=True))
