"""Stores em memória, apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from app.domain.conversation import (
    Conversation,
    ConversationStatus,
    new_conversation_id,
    utc_now,
)
from app.protocols.conversation_store import ConversationStoreProtocol
from app.protocols.dedupe import AsyncDedupeProtocol
from utils.errors import ConversationNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from app.domain.conversation import Channel, ConversationInit, Message


class MemoryConversationStore(ConversationStoreProtocol):
    """Conversation store em memória, apenas para dev/test.

    Um `asyncio.Lock` serializa as mutações; as leituras veem sempre o
    último estado gravado.

    Entra e sai sempre uma cópia: quem recebe uma conversa não altera o
    estado guardado ao mexer na metadata.
    """

    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}
        self._lock = asyncio.Lock()

    async def find_by_participant(
        self,
        participant_id: str,
        *,
        channel: Channel | None = None,
    ) -> Conversation | None:
        candidates = [
            conv
            for conv in self._conversations.values()
            if conv.participant_id == participant_id
            and (channel is None or conv.channel is channel)
        ]
        if not candidates:
            return None
        return _snapshot(max(candidates, key=lambda conv: conv.updated_at))

    async def find_by_id(self, conversation_id: str) -> Conversation | None:
        conversation = self._conversations.get(conversation_id)
        return _snapshot(conversation) if conversation is not None else None

    async def create(self, init: ConversationInit) -> Conversation:
        now = utc_now()
        conversation = Conversation(
            id=new_conversation_id(),
            participant_id=init.participant_id,
            channel=init.channel,
            metadata=dict(init.metadata),
            created_at=now,
            updated_at=now,
        )
        async with self._lock:
            self._conversations[conversation.id] = conversation
        return _snapshot(conversation)

    async def append_message(self, conversation_id: str, message: Message) -> Conversation:
        return await self._mutate(
            conversation_id,
            lambda conv: replace(conv, messages=(*conv.messages, message)),
        )

    async def update_status(
        self,
        conversation_id: str,
        status: ConversationStatus,
    ) -> Conversation:
        return await self._mutate(conversation_id, lambda conv: replace(conv, status=status))

    async def update_metadata(
        self,
        conversation_id: str,
        updates: Mapping[str, Any],
    ) -> Conversation:
        return await self._mutate(
            conversation_id,
            lambda conv: replace(conv, metadata={**conv.metadata, **updates}),
        )

    async def list_recent(
        self,
        *,
        limit: int = 50,
        status: ConversationStatus | None = None,
        participant_id: str | None = None,
    ) -> Sequence[Conversation]:
        conversations = [
            conv
            for conv in self._conversations.values()
            if (status is None or conv.status is status)
            and (participant_id is None or conv.participant_id == participant_id)
        ]
        conversations.sort(key=lambda conv: conv.updated_at, reverse=True)
        return [_snapshot(conv) for conv in conversations[: max(limit, 0)]]

    async def _mutate(
        self,
        conversation_id: str,
        change: Callable[[Conversation], Conversation],
    ) -> Conversation:
        async with self._lock:
            current = self._conversations.get(conversation_id)
            if current is None:
                raise ConversationNotFoundError(conversation_id)
            updated = _snapshot(replace(change(current), updated_at=utc_now()))
            self._conversations[conversation_id] = updated
            return _snapshot(updated)


def _snapshot(conversation: Conversation) -> Conversation:
    messages = tuple(replace(m, metadata=dict(m.metadata)) for m in conversation.messages)
    return replace(conversation, messages=messages, metadata=dict(conversation.metadata))


class MemoryDedupeStore(AsyncDedupeProtocol):
    """Store de dedupe em memória, apenas para dev/test."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._store: dict[str, float] = {}  # key -> expires_at
        self._clock = clock

    def _cleanup_expired(self) -> None:
        """Remove entradas expiradas."""
        now = self._clock()
        expired = [k for k, v in self._store.items() if v <= now]
        for k in expired:
            del self._store[k]

    async def seen(self, key: str, ttl: int) -> bool:
        """Verifica e marca chave atomicamente."""
        self._cleanup_expired()
        if key in self._store:
            return True  # Duplicado
        self._store[key] = self._clock() + ttl
        return False  # Novo

    async def is_duplicate(self, key: str) -> bool:
        self._cleanup_expired()
        return key in self._store
