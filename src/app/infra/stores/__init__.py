"""Stores: implementações concretas de persistência.

Módulos disponíveis:
    - memory_stores: Conversation store e dedupe em memória (dev/test)
    - firestore_conversation_store: Store de conversas usando Firestore
    - redis_dedupe_store: Store de dedupe usando Redis
"""

from __future__ import annotations

from app.infra.stores.firestore_conversation_store import FirestoreConversationStore
from app.infra.stores.memory_stores import MemoryConversationStore, MemoryDedupeStore
from app.infra.stores.redis_dedupe_store import RedisDedupeStore

__all__ = [
    # Firestore
    "FirestoreConversationStore",
    # Memory (dev/test)
    "MemoryConversationStore",
    "MemoryDedupeStore",
    # Redis
    "RedisDedupeStore",
]
