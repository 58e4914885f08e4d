"""Factories de dependências: criação de implementações concretas.

Centraliza a escolha de backends a partir das settings de ambiente.
Nenhum outro módulo instancia stores ou clientes externos.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import (
    create_async_redis_client,
    create_firestore_client,
    create_sms_client,
)
from app.infra.stores import (
    FirestoreConversationStore,
    MemoryConversationStore,
    MemoryDedupeStore,
    RedisDedupeStore,
)
from app.services.business_hours import BusinessHours
from app.use_cases.conversations import (
    ConversationManager,
    ConversationOrchestrator,
    OutboundDispatcher,
)
from config.settings import (
    get_base_settings,
    get_dedupe_settings,
    get_firestore_settings,
    get_riley_settings,
    get_storage_settings,
)

if TYPE_CHECKING:
    from ai.config.template_loader import ResponseTemplateTable
    from ai.core.client import GenerativeResponderProtocol
    from app.infra.ai.openai_client import OpenAIResponder
    from app.protocols.conversation_store import ConversationStoreProtocol
    from app.protocols.dedupe import AsyncDedupeProtocol
    from config.settings.ai.openai import OpenAISettings
    from config.settings.sms import TwilioSettings

logger = logging.getLogger(__name__)


def _warn_memory_backend(component: str) -> None:
    environment = get_base_settings().environment
    if environment != "development":
        logger.warning(
            "memory_backend_in_non_dev",
            extra={"component": component, "environment": environment},
        )


# ──────────────────────────────────────────────────────────────────────────────
# Stores
# ──────────────────────────────────────────────────────────────────────────────


def create_conversation_store() -> ConversationStoreProtocol:
    """Cria o ConversationStore conforme CONVERSATION_STORE_BACKEND.

    - "memory": MemoryConversationStore (dev only)
    - "firestore": FirestoreConversationStore (staging/production)
    """
    storage = get_storage_settings()

    if storage.conversation_backend == "firestore":
        store: ConversationStoreProtocol = FirestoreConversationStore(
            create_firestore_client(),
            collection=get_firestore_settings().collection_conversations,
            ttl_days=storage.conversation_ttl_days,
        )
        logger.info("conversation_store_created", extra={"backend": "firestore"})
        return store

    _warn_memory_backend("conversation_store")
    logger.info("conversation_store_created", extra={"backend": "memory"})
    return MemoryConversationStore()


def create_dedupe_store() -> AsyncDedupeProtocol:
    """Cria store de dedupe conforme DEDUPE_BACKEND.

    - "memory": MemoryDedupeStore (dev only)
    - "redis": RedisDedupeStore (staging/production)
    """
    settings = get_dedupe_settings()

    if settings.backend == "redis":
        store: AsyncDedupeProtocol = RedisDedupeStore(
            create_async_redis_client(), prefix=settings.key_prefix
        )
        logger.info("dedupe_store_created", extra={"backend": "redis"})
        return store

    _warn_memory_backend("dedupe_store")
    logger.info("dedupe_store_created", extra={"backend": "memory"})
    return MemoryDedupeStore()


# ──────────────────────────────────────────────────────────────────────────────
# Colaboradores generativos
# ──────────────────────────────────────────────────────────────────────────────


def create_responders(settings: OpenAISettings) -> list[OpenAIResponder]:
    """Cria os colaboradores generativos (primário e secundário).

    Lista vazia quando OPENAI_ENABLED=false ou sem api key: o orquestrador
    responde só com as regras determinísticas.
    """
    if not settings.enabled or not settings.api_key:
        logger.info("generative_responders_disabled")
        return []

    from app.infra.ai import OpenAIResponder

    responders = [OpenAIResponder(settings=settings)]
    if settings.has_fallback_provider:
        responders.append(
            OpenAIResponder(
                settings=settings,
                model=settings.fallback_model,
                base_url=settings.fallback_base_url,
                name=f"openai-fallback:{settings.fallback_model}",
            )
        )
    logger.info(
        "generative_responders_created",
        extra={"providers": [responder.name for responder in responders]},
    )
    return responders


# ──────────────────────────────────────────────────────────────────────────────
# Casos de uso
# ──────────────────────────────────────────────────────────────────────────────


def create_orchestrator(
    *,
    store: ConversationStoreProtocol,
    templates: ResponseTemplateTable,
    responders: list[GenerativeResponderProtocol],
    generation_timeout_seconds: float,
) -> ConversationOrchestrator:
    """Cria o orquestrador de mensagens inbound."""
    riley = get_riley_settings()
    business_hours = BusinessHours(riley) if riley.after_hours_enabled else None
    orchestrator = ConversationOrchestrator(
        store=store,
        templates=templates,
        settings=riley,
        responders=responders,
        business_hours=business_hours,
        generation_timeout_seconds=generation_timeout_seconds,
        history_window=get_storage_settings().history_window,
    )
    logger.info(
        "conversation_orchestrator_created",
        extra={
            "responders": len(responders),
            "after_hours_enabled": business_hours is not None,
        },
    )
    return orchestrator


def create_conversation_manager(
    store: ConversationStoreProtocol,
    responders: list[OpenAIResponder],
) -> ConversationManager:
    """Cria o caso de uso de gestão; o primário também sugere melhorias."""
    improver = responders[0] if responders else None
    return ConversationManager(store, improver=improver)


def create_outbound_dispatcher(settings: TwilioSettings) -> OutboundDispatcher | None:
    """Cria o dispatcher de envio SMS; None sem credenciais de envio."""
    if not settings.can_send:
        logger.info("outbound_dispatcher_disabled", extra={"channel": "sms"})
        return None

    from app.infra.sms import TwilioSmsSender

    sender = TwilioSmsSender(create_sms_client(settings), settings.from_number)
    logger.info("outbound_dispatcher_created", extra={"channel": "sms"})
    return OutboundDispatcher(sender)
