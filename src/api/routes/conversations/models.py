"""Contratos HTTP da API de conversas (operador/dashboard)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class StatusUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: str | None = None


class OperatorMessageRequest(BaseModel):
    """Mensagem manual; com `deliver` e conversa SMS, também é enviada."""

    model_config = ConfigDict(extra="ignore")

    message: str | None = None
    role: str | None = None
    deliver: bool = False


class FeedbackRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Validado no caso de uso (1..5) para responder 400 com mensagem própria
    rating: Any = None
    comment: str | None = None
