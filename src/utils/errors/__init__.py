"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    CollaboratorUnavailableError,
    ConversationNotFoundError,
    DeliveryError,
    InfrastructureError,
    PersistenceError,
    RedisConnectionError,
    RileyError,
    ValidationError,
)

__all__ = [
    "CollaboratorUnavailableError",
    "ConversationNotFoundError",
    "DeliveryError",
    "InfrastructureError",
    "PersistenceError",
    "RedisConnectionError",
    "RileyError",
    "ValidationError",
]
