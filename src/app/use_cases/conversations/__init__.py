"""Use cases de conversa (inbound e gestão)."""

from .handle_inbound import ConversationOrchestrator, InboundResult, parse_channel
from .manage_conversations import (
    ConversationListing,
    ConversationManager,
    ConversationStats,
    compute_stats,
)
from .outbound_dispatcher import OutboundDispatcher
from .participant_locks import ParticipantLocks

__all__ = [
    "ConversationListing",
    "ConversationManager",
    # Inbound
    "ConversationOrchestrator",
    "ConversationStats",
    "InboundResult",
    # Outbound
    "OutboundDispatcher",
    "ParticipantLocks",
    "compute_stats",
    "parse_channel",
]
