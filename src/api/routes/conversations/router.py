"""API de conversas: consulta e gestão pelo operador.

Endpoints:
- GET  /conversations?limit=&participantId=
- GET  /conversations/{conversation_id}
- POST /conversations/{conversation_id}/status    {status}
- POST /conversations/{conversation_id}/messages  {message, role}
- POST /conversations/{conversation_id}/feedback  {rating, comment}

Erros: 400 `{error}` (validação), 404 `{error}` (conversa inexistente),
500 `{error: "Internal server error"}`.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from api.routes.conversations.models import (
    FeedbackRequest,
    OperatorMessageRequest,
    StatusUpdateRequest,
)
from app.bootstrap import get_conversation_manager, get_outbound_dispatcher
from app.domain.conversation import Channel, Conversation, MessageRole
from app.use_cases.conversations import ConversationManager, OutboundDispatcher
from utils.errors import ConversationNotFoundError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()


async def _respond(action: Callable[[], Awaitable[dict[str, Any]]]) -> JSONResponse:
    """Executa o caso de uso e traduz exceções para status HTTP."""
    try:
        return JSONResponse(content=await action())
    except ValidationError as exc:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})
    except ConversationNotFoundError:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Conversation not found"},
        )
    except Exception:
        logger.exception("conversations_api_failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


@router.get("")
async def list_conversations(
    limit: int = Query(default=50),
    participant_id: str | None = Query(default=None, alias="participantId"),
    manager: ConversationManager = Depends(get_conversation_manager),
) -> JSONResponse:
    async def action() -> dict[str, Any]:
        listing = await manager.list_conversations(limit=limit, participant_id=participant_id)
        return {
            "conversations": [conv.to_dict() for conv in listing.conversations],
            "stats": listing.stats.to_dict(),
            "timestamp": datetime.now(UTC).isoformat(),
        }

    return await _respond(action)


@router.get("/{conversation_id}")
async def get_conversation(
    conversation_id: str,
    manager: ConversationManager = Depends(get_conversation_manager),
) -> JSONResponse:
    async def action() -> dict[str, Any]:
        conversation = await manager.get_conversation(conversation_id)
        return conversation.to_dict()

    return await _respond(action)


@router.post("/{conversation_id}/status")
async def update_status(
    conversation_id: str,
    payload: StatusUpdateRequest,
    manager: ConversationManager = Depends(get_conversation_manager),
) -> JSONResponse:
    async def action() -> dict[str, Any]:
        conversation = await manager.update_status(conversation_id, payload.status)
        return {"success": True, "conversation": conversation.to_dict()}

    return await _respond(action)


@router.post("/{conversation_id}/messages")
async def add_message(
    conversation_id: str,
    payload: OperatorMessageRequest,
    manager: ConversationManager = Depends(get_conversation_manager),
    dispatcher: OutboundDispatcher | None = Depends(get_outbound_dispatcher),
) -> JSONResponse:
    async def action() -> dict[str, Any]:
        conversation = await manager.add_message(conversation_id, payload.message, payload.role)
        if payload.deliver and dispatcher is not None:
            _deliver_operator_reply(dispatcher, conversation)
        return {"success": True, "conversation": conversation.to_dict()}

    return await _respond(action)


@router.post("/{conversation_id}/feedback")
async def record_feedback(
    conversation_id: str,
    payload: FeedbackRequest,
    manager: ConversationManager = Depends(get_conversation_manager),
) -> JSONResponse:
    async def action() -> dict[str, Any]:
        conversation = await manager.record_feedback(
            conversation_id, payload.rating, payload.comment
        )
        return {"success": True, "conversation": conversation.to_dict()}

    return await _respond(action)


def _deliver_operator_reply(dispatcher: OutboundDispatcher, conversation: Conversation) -> None:
    """Envia por SMS a resposta do operador (só mensagens do assistente)."""
    last = conversation.last_message
    if conversation.channel is not Channel.SMS or last is None:
        return
    if last.role is not MessageRole.ASSISTANT:
        return
    dispatcher.dispatch(conversation.participant_id, last.content, conversation.id)
