"""Contratos HTTP do endpoint de mensagens (camelCase no fio)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MessageRequest(BaseModel):
    """Body de `POST /message`.

    Campos obrigatórios são validados pelo caso de uso, para que o erro
    400 nomeie o campo ausente.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    participant_id: str | None = Field(default=None, alias="participantId")
    channel: str | None = None
    text: str | None = None
    conversation_id: str | None = Field(default=None, alias="conversationId")
    # Envia a resposta também por SMS (canal sms com Twilio configurado)
    deliver: bool = False


class MessageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: str = Field(alias="conversationId")
    reply_text: str = Field(alias="replyText")
    timestamp: str
