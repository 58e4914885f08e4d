"""Agregador de settings base."""

from __future__ import annotations

from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.dedupe import (
    DedupeBackend,
    DedupeSettings,
    get_dedupe_settings,
)
from config.settings.base.storage import (
    ConversationStoreBackend,
    StorageSettings,
    get_storage_settings,
)

__all__ = [
    "BaseSettings",
    "ConversationStoreBackend",
    "DedupeBackend",
    "DedupeSettings",
    "Environment",
    "StorageSettings",
    "get_base_settings",
    "get_dedupe_settings",
    "get_storage_settings",
]
