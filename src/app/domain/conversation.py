"""Entidades de domínio de conversa.

Imutáveis: toda mutação no store produz uma nova instância. Mensagens são
append-only e metadata só cresce (merge aditivo).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from ai.models.analysis import MessageAnalysis
from ai.models.caller_context import CallerContext

CONVERSATION_ID_PREFIX = "conv_"


class Channel(StrEnum):
    SMS = "sms"
    WEB = "web"
    EMAIL = "email"


class ConversationStatus(StrEnum):
    ACTIVE = "active"
    PENDING = "pending"
    RESOLVED = "resolved"


class MessageRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


def utc_now() -> datetime:
    return datetime.now(UTC)


def new_conversation_id() -> str:
    """Identificador opaco gerado pelo store."""
    return f"{CONVERSATION_ID_PREFIX}{uuid.uuid4().hex}"


def new_message_id() -> str:
    return f"msg_{uuid.uuid4().hex}"


@dataclass(frozen=True, slots=True)
class Message:
    """Mensagem de uma conversa.

    Atributos:
        role: Autor (user ou assistant)
        content: Texto
        timestamp: Momento do registro (UTC)
        analysis: Análise das regras; presente só em mensagens `user`
        message_id: Identificador único da mensagem
        metadata: Dados livres (ex.: reply_source, operador)
    """

    role: MessageRole
    content: str
    timestamp: datetime = field(default_factory=utc_now)
    analysis: MessageAnalysis | None = None
    message_id: str = field(default_factory=new_message_id)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.role is not MessageRole.USER and self.analysis is not None:
            raise ValueError("analysis só é permitido em mensagens do usuário")

    @classmethod
    def user(cls, content: str, analysis: MessageAnalysis | None = None) -> Message:
        return cls(role=MessageRole.USER, content=content, analysis=analysis)

    @classmethod
    def assistant(cls, content: str, **metadata: Any) -> Message:
        return cls(role=MessageRole.ASSISTANT, content=content, metadata=dict(metadata))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "messageId": self.message_id,
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.analysis is not None:
            data["analysis"] = self.analysis.to_dict()
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        timestamp = data.get("timestamp")
        analysis = data.get("analysis")
        return cls(
            role=MessageRole(data.get("role", MessageRole.USER.value)),
            content=str(data.get("content", "")),
            timestamp=_parse_datetime(timestamp) if timestamp else utc_now(),
            analysis=MessageAnalysis.from_dict(analysis) if analysis else None,
            message_id=str(data.get("messageId") or new_message_id()),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass(frozen=True, slots=True)
class ConversationInit:
    """Dados para criação de conversa (o id é atribuído pelo store)."""

    participant_id: str
    channel: Channel
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Conversation:
    """Conversa persistida entre um participante e o assistente."""

    id: str
    participant_id: str
    channel: Channel
    status: ConversationStatus = ConversationStatus.ACTIVE
    messages: tuple[Message, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def is_active(self) -> bool:
        return self.status is ConversationStatus.ACTIVE

    @property
    def last_message(self) -> Message | None:
        return self.messages[-1] if self.messages else None

    def to_dict(self) -> dict[str, Any]:
        """Representação da API (camelCase)."""
        last = self.last_message
        return {
            "conversationId": self.id,
            "participantId": self.participant_id,
            "channel": self.channel.value,
            "status": self.status.value,
            "messages": [message.to_dict() for message in self.messages],
            "messageCount": len(self.messages),
            "lastMessage": last.content if last else "",
            "metadata": dict(self.metadata),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    parsed = datetime.fromisoformat(str(value))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


def _as_text(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def caller_context_from_metadata(metadata: dict[str, Any] | None) -> CallerContext:
    """Deriva o CallerContext a partir da metadata da conversa.

    Chaves aceitas em snake_case ou camelCase (ex.: `has_appointment` ou
    `hasAppointment`). Ausentes viram False/None.
    """
    data = metadata or {}

    def pick(snake: str, camel: str) -> Any:
        return data.get(snake, data.get(camel))

    return CallerContext(
        has_appointment=_as_bool(pick("has_appointment", "hasAppointment")),
        has_recent_inspection=_as_bool(pick("has_recent_inspection", "hasRecentInspection")),
        has_quote=_as_bool(pick("has_quote", "hasQuote")),
        customer_name=_as_text(pick("customer_name", "customerName")),
        service_type=_as_text(pick("service_type", "serviceType")),
        appointment_date=_as_text(pick("appointment_date", "appointmentDate")),
        appointment_time=_as_text(pick("appointment_time", "appointmentTime")),
        specialist_name=_as_text(pick("specialist_name", "specialistName")),
        address=_as_text(pick("address", "address")),
        eta_minutes=_as_text(pick("eta_minutes", "etaMinutes")),
    )
