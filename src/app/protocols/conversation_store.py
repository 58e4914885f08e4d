"""Protocolos de domínio para Conversation Store.

Define o contrato de persistência de conversas usado pelo orquestrador e
pela API de conversas.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from app.domain.conversation import (
        Channel,
        Conversation,
        ConversationInit,
        ConversationStatus,
        Message,
    )


class ConversationStoreProtocol(ABC):
    """Contrato para armazenamento de conversas.

    Responsabilidades:
        - Criar conversas (id atribuído pelo store)
        - Persistir mensagens de forma append-only
        - Atualizar status e metadata (merge aditivo)
        - Listar conversas recentes

    Invariantes:
        - Read-your-writes: um `append_message` concluído é visível no
          `find_by_id` seguinte
        - Entidades retornadas são novas instâncias (imutáveis)
        - Sem PII em logs
    """

    @abstractmethod
    async def find_by_participant(
        self,
        participant_id: str,
        *,
        channel: Channel | None = None,
    ) -> Conversation | None:
        """Conversa mais recente (por `updated_at`) do participante."""

    @abstractmethod
    async def find_by_id(self, conversation_id: str) -> Conversation | None:
        """Conversa pelo id ou None."""

    @abstractmethod
    async def create(self, init: ConversationInit) -> Conversation:
        """Cria conversa ativa, sem mensagens.

        Raises:
            PersistenceError: Erro de persistência
        """

    @abstractmethod
    async def append_message(self, conversation_id: str, message: Message) -> Conversation:
        """Anexa mensagem e atualiza `updated_at`.

        Raises:
            ConversationNotFoundError: Conversa inexistente
            PersistenceError: Erro de persistência
        """

    @abstractmethod
    async def update_status(
        self,
        conversation_id: str,
        status: ConversationStatus,
    ) -> Conversation:
        """Altera o status.

        Raises:
            ConversationNotFoundError: Conversa inexistente
        """

    @abstractmethod
    async def update_metadata(
        self,
        conversation_id: str,
        updates: Mapping[str, Any],
    ) -> Conversation:
        """Merge aditivo de metadata (chaves existentes são sobrescritas).

        Raises:
            ConversationNotFoundError: Conversa inexistente
        """

    @abstractmethod
    async def list_recent(
        self,
        *,
        limit: int = 50,
        status: ConversationStatus | None = None,
        participant_id: str | None = None,
    ) -> Sequence[Conversation]:
        """Conversas mais recentes primeiro (por `updated_at`).

        Filtros opcionais por status e por participante.
        """
