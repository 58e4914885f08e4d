"""Settings do ConversationStore."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

ConversationStoreBackend = Literal["memory", "firestore"]


@dataclass(frozen=True)
class StorageSettings:
    """Configurações de persistência de conversas.

    Attributes:
        conversation_backend: Backend do ConversationStore (memory|firestore)
        conversation_ttl_days: Dias até expiração (TTL policy do Firestore)
        history_window: Mensagens recentes enviadas ao colaborador generativo
    """

    conversation_backend: ConversationStoreBackend = "memory"
    conversation_ttl_days: int = 30
    history_window: int = 10

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de persistência."""
        errors: list[str] = []

        if self.conversation_backend not in {"memory", "firestore"}:
            errors.append(
                f"CONVERSATION_STORE_BACKEND inválido: {self.conversation_backend}"
            )

        if self.conversation_backend == "memory" and not base.is_development:
            errors.append("CONVERSATION_STORE_BACKEND=memory proibido em staging/production")

        if self.conversation_ttl_days <= 0:
            errors.append("CONVERSATION_TTL_DAYS deve ser > 0")

        if self.history_window < 0:
            errors.append("CONVERSATION_HISTORY_WINDOW deve ser >= 0")

        return errors


def _load_storage_from_env() -> StorageSettings:
    """Carrega StorageSettings de variáveis de ambiente."""
    backend_str = os.getenv("CONVERSATION_STORE_BACKEND", "memory").lower()
    backend: ConversationStoreBackend = "firestore" if backend_str == "firestore" else "memory"
    return StorageSettings(
        conversation_backend=backend,
        conversation_ttl_days=int(os.getenv("CONVERSATION_TTL_DAYS", "30")),
        history_window=int(os.getenv("CONVERSATION_HISTORY_WINDOW", "10")),
    )


@lru_cache(maxsize=1)
def get_storage_settings() -> StorageSettings:
    """Retorna instância cacheada de StorageSettings."""
    return _load_storage_from_env()
