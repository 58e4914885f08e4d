"""Taxonomia de exceções compartilhada pelas camadas do Riley.

Regras de propagação:
- Componentes puros (ai/rules) nunca levantam exceção por input malformado.
- Falhas de colaborador generativo são recuperadas localmente (fallback).
- Apenas falhas de persistência sobem como erro visível ao chamador.
"""

from __future__ import annotations


class RileyError(Exception):
    """Base para erros de domínio do Riley."""


class ValidationError(RileyError):
    """Input obrigatório ausente ou inválido (HTTP 400).

    Attributes:
        field: Nome do campo inválido (exposto ao chamador).
    """

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"{field} is required")


class ConversationNotFoundError(RileyError):
    """Conversa referenciada não existe (HTTP 404 em APIs de consulta)."""

    def __init__(self, conversation_id: str) -> None:
        self.conversation_id = conversation_id
        super().__init__(f"Conversation not found: {conversation_id}")


class CollaboratorUnavailableError(RileyError):
    """Colaborador generativo indisponível, com timeout ou resposta inválida.

    Nunca é exposto ao usuário final: o orquestrador cai para as regras.
    """

    def __init__(self, provider: str, reason: str) -> None:
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider}: {reason}")


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class PersistenceError(InfrastructureError):
    """Falha de leitura/escrita no ConversationStore (sem retry no core)."""


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""


class DeliveryError(InfrastructureError):
    """Falha ao entregar resposta outbound ao provedor (ex.: Twilio)."""
