"""Casos de uso da API de conversas (operador/dashboard).

Listagem com estatísticas, consulta, mudança de status, mensagem manual
do operador e registro de feedback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from app.domain.conversation import ConversationStatus, Message, MessageRole, utc_now
from utils.errors import CollaboratorUnavailableError, ConversationNotFoundError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.domain.conversation import Conversation
    from app.protocols.conversation_store import ConversationStoreProtocol

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 500
# Notas abaixo disso marcam a conversa para revisão
REVIEW_RATING_THRESHOLD = 3
MIN_RATING = 1
MAX_RATING = 5


class ResponseImproverProtocol(Protocol):
    """Colaborador opcional que reescreve respostas a partir de feedback."""

    async def improve_response(self, original: str, feedback: str) -> str: ...


@dataclass(frozen=True, slots=True)
class ConversationStats:
    total: int
    active: int
    resolved: int
    average_messages: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "active": self.active,
            "resolved": self.resolved,
            "averageMessages": self.average_messages,
        }


@dataclass(frozen=True, slots=True)
class ConversationListing:
    conversations: tuple[Conversation, ...]
    stats: ConversationStats


def compute_stats(conversations: Sequence[Conversation]) -> ConversationStats:
    """Totais por status e média de mensagens (arredondada)."""
    total = len(conversations)
    message_count = sum(len(conv.messages) for conv in conversations)
    return ConversationStats(
        total=total,
        active=sum(1 for conv in conversations if conv.status is ConversationStatus.ACTIVE),
        resolved=sum(1 for conv in conversations if conv.status is ConversationStatus.RESOLVED),
        average_messages=round(message_count / (total or 1)),
    )


def parse_status(value: str | None) -> ConversationStatus:
    """Status informado pela API; inválido levanta ValidationError."""
    try:
        return ConversationStatus((value or "").strip().lower())
    except ValueError as exc:
        raise ValidationError(
            "status",
            "Invalid status. Must be active, resolved, or pending",
        ) from exc


def parse_rating(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int | str):
        raise ValidationError("rating", "rating must be an integer between 1 and 5")
    try:
        rating = int(value)
    except ValueError as exc:
        raise ValidationError("rating", "rating must be an integer between 1 and 5") from exc
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError("rating", "rating must be an integer between 1 and 5")
    return rating


class ConversationManager:
    """Operações de leitura/gestão sobre o ConversationStore.

    Args:
        store: Conversation store
        improver: Colaborador que sugere resposta melhorada no feedback
    """

    def __init__(
        self,
        store: ConversationStoreProtocol,
        *,
        improver: ResponseImproverProtocol | None = None,
    ) -> None:
        self._store = store
        self._improver = improver

    async def list_conversations(
        self,
        *,
        limit: int = DEFAULT_LIST_LIMIT,
        participant_id: str | None = None,
    ) -> ConversationListing:
        bounded = max(1, min(limit or DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT))
        conversations = tuple(
            await self._store.list_recent(limit=bounded, participant_id=participant_id or None)
        )
        return ConversationListing(conversations=conversations, stats=compute_stats(conversations))

    async def get_conversation(self, conversation_id: str) -> Conversation:
        """Raises: ConversationNotFoundError."""
        conversation = await self._store.find_by_id(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        return conversation

    async def update_status(self, conversation_id: str, status: str | None) -> Conversation:
        """Transição explícita de status (operador/API)."""
        new_status = parse_status(status)
        conversation = await self._store.update_status(conversation_id, new_status)
        logger.info(
            "conversation_status_updated",
            extra={"conversation_id": conversation_id, "status": new_status.value},
        )
        return conversation

    async def add_message(
        self,
        conversation_id: str,
        content: str | None,
        role: str | None,
    ) -> Conversation:
        """Anexa mensagem manual (ex.: resposta do operador)."""
        if not content or not content.strip():
            raise ValidationError("message", "Message and role are required")
        if not role:
            raise ValidationError("role", "Message and role are required")
        try:
            message_role = MessageRole(role.strip().lower())
        except ValueError as exc:
            raise ValidationError("role", "role must be user or assistant") from exc

        message = Message(
            role=message_role, content=content.strip(), metadata={"source": "operator"}
        )
        return await self._store.append_message(conversation_id, message)

    async def record_feedback(
        self,
        conversation_id: str,
        rating: Any,
        comment: str | None = None,
    ) -> Conversation:
        """Registra feedback na metadata; nota baixa marca `needs_review`.

        Com comentário e improver configurado, guarda também uma sugestão
        de resposta melhorada para a última resposta do assistente.
        """
        score = parse_rating(rating)
        conversation = await self.get_conversation(conversation_id)

        updates: dict[str, Any] = {
            "feedback": {
                "rating": score,
                "comment": (comment or "").strip(),
                "recorded_at": utc_now().isoformat(),
            },
        }
        if score < REVIEW_RATING_THRESHOLD:
            updates["needs_review"] = True

        suggestion = await self._suggest_improvement(conversation, comment)
        if suggestion:
            updates["improved_response"] = suggestion

        logger.info(
            "conversation_feedback_recorded",
            extra={
                "conversation_id": conversation_id,
                "rating": score,
                "needs_review": score < REVIEW_RATING_THRESHOLD,
            },
        )
        return await self._store.update_metadata(conversation_id, updates)

    async def _suggest_improvement(
        self,
        conversation: Conversation,
        comment: str | None,
    ) -> str | None:
        if self._improver is None or not comment or not comment.strip():
            return None
        last_reply = next(
            (m for m in reversed(conversation.messages) if m.role is MessageRole.ASSISTANT),
            None,
        )
        if last_reply is None:
            return None
        try:
            return await self._improver.improve_response(last_reply.content, comment.strip())
        except CollaboratorUnavailableError as exc:
            logger.warning(
                "feedback_improvement_unavailable",
                extra={"conversation_id": conversation.id, "provider": exc.provider},
            )
            return None
