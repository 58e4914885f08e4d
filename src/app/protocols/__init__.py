"""Protocolos e contratos do core da aplicação."""

from .conversation_store import ConversationStoreProtocol
from .dedupe import AsyncDedupeProtocol
from .outbound_sender import DeliverySenderProtocol

__all__ = [
    "AsyncDedupeProtocol",
    "ConversationStoreProtocol",
    "DeliverySenderProtocol",
]
