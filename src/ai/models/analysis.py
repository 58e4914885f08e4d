"""Sinal estruturado extraído de uma mensagem inbound.

Produzido por `ai.rules.message_analyzer.analyze_message` e anexado à
mensagem `user` correspondente para auditoria/treino.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Intent(StrEnum):
    """Intenções reconhecidas pelo analisador (conjunto fechado)."""

    APPOINTMENT = "appointment"
    SERVICE_INQUIRY = "service_inquiry"
    PRICING = "pricing"
    EMERGENCY = "emergency"
    FOLLOWUP = "followup"
    COMPLAINT = "complaint"
    CONFIRMATION = "confirmation"
    CANCELLATION = "cancellation"
    GENERAL = "general"


class Sentiment(StrEnum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class Urgency(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Service(StrEnum):
    """Categorias de serviço atendidas."""

    ROOFING = "roofing"
    SIDING = "siding"
    WINDOWS = "windows"
    GUTTERS = "gutters"


@dataclass(frozen=True, slots=True)
class MessageAnalysis:
    """Resultado do analisador de mensagens.

    Atributos:
        intent: Intenção (primeira categoria que casou, na ordem fixa)
        sentiment: Sentimento por contagem de palavras positivas/negativas
        urgency: Urgência por contagem de palavras urgentes
        service: Serviço detectado (None quando nenhum casou)
        keywords: Tokens de conteúdo, na ordem do texto (duplicatas mantidas)
        has_question: True se a mensagem é uma pergunta
    """

    intent: Intent = Intent.GENERAL
    sentiment: Sentiment = Sentiment.NEUTRAL
    urgency: Urgency = Urgency.LOW
    service: Service | None = None
    keywords: tuple[str, ...] = ()
    has_question: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serializa para persistência (valores primitivos)."""
        return {
            "intent": self.intent.value,
            "sentiment": self.sentiment.value,
            "urgency": self.urgency.value,
            "service": self.service.value if self.service else None,
            "keywords": list(self.keywords),
            "hasQuestion": self.has_question,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MessageAnalysis:
        """Reconstrói a partir de `to_dict`."""
        service = data.get("service")
        return cls(
            intent=Intent(data.get("intent", Intent.GENERAL.value)),
            sentiment=Sentiment(data.get("sentiment", Sentiment.NEUTRAL.value)),
            urgency=Urgency(data.get("urgency", Urgency.LOW.value)),
            service=Service(service) if service else None,
            keywords=tuple(data.get("keywords") or ()),
            has_question=bool(data.get("hasQuestion", False)),
        )
