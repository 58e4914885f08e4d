"""Agregador de settings do Riley.

Re-exporta as settings de cada domínio. Cada getter é cacheado
(`lru_cache`) e lê variáveis de ambiente na primeira chamada.
"""

from __future__ import annotations

from config.settings.ai import (
    OPENAI_BASE_URL,
    OpenAISettings,
    get_openai_settings,
)
from config.settings.base import (
    BaseSettings,
    ConversationStoreBackend,
    DedupeBackend,
    DedupeSettings,
    Environment,
    StorageSettings,
    get_base_settings,
    get_dedupe_settings,
    get_storage_settings,
)
from config.settings.infra import (
    FirestoreSettings,
    get_firestore_settings,
)
from config.settings.riley import (
    DayHours,
    RileySettings,
    get_riley_settings,
)
from config.settings.sms import (
    TwilioSettings,
    get_twilio_settings,
)

__all__ = [
    "OPENAI_BASE_URL",
    "BaseSettings",
    "ConversationStoreBackend",
    "DayHours",
    "DedupeBackend",
    "DedupeSettings",
    "Environment",
    "FirestoreSettings",
    "OpenAISettings",
    "RileySettings",
    "StorageSettings",
    "TwilioSettings",
    "get_base_settings",
    "get_dedupe_settings",
    "get_firestore_settings",
    "get_openai_settings",
    "get_riley_settings",
    "get_storage_settings",
    "get_twilio_settings",
]
