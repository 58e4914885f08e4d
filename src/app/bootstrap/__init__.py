"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, get_orchestrator

    # Na inicialização do serviço
    initialize_app()

    # Obter casos de uso (singletons lazy)
    orchestrator = get_orchestrator()
"""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_dedupe_settings,
    get_firestore_settings,
    get_openai_settings,
    get_riley_settings,
    get_storage_settings,
    get_twilio_settings,
)

if TYPE_CHECKING:
    from ai.config.template_loader import ResponseTemplateTable
    from app.infra.ai.openai_client import OpenAIResponder
    from app.infra.secrets import CachedSecretProvider
    from app.protocols.conversation_store import ConversationStoreProtocol
    from app.protocols.dedupe import AsyncDedupeProtocol
    from app.use_cases.conversations import (
        ConversationManager,
        ConversationOrchestrator,
        OutboundDispatcher,
    )
    from config.settings import OpenAISettings, TwilioSettings

# Nome do serviço para logs
SERVICE_NAME = "riley"

STRICT_VALIDATION_ENVS = {"staging", "production"}

# Nomes dos secrets (Secret Manager: <nome>-<environment>; env: NOME_EM_MAIUSCULAS)
OPENAI_API_KEY_SECRET = "openai-api-key"
TWILIO_ACCOUNT_SID_SECRET = "twilio-account-sid"
TWILIO_AUTH_TOKEN_SECRET = "twilio-auth-token"

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação (logging JSON estruturado com correlation_id).

    Deve ser chamada uma vez no início do serviço.
    """
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name,
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.

    Raises:
        RuntimeError: Configuração inválida em ambiente estrito
    """
    base = get_base_settings()
    environment = base.environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"openai: {error}" for error in resolve_openai_settings().validate())
    errors.extend(f"twilio: {error}" for error in resolve_twilio_settings().validate())
    errors.extend(f"riley: {error}" for error in get_riley_settings().validate())
    errors.extend(f"dedupe: {error}" for error in get_dedupe_settings().validate(base))

    storage = get_storage_settings()
    errors.extend(f"storage: {error}" for error in storage.validate(base))
    if storage.conversation_backend == "firestore":
        firestore_errors = get_firestore_settings().validate(base.gcp_project)
        errors.extend(f"firestore: {error}" for error in firestore_errors)

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Secrets
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_secret_provider() -> CachedSecretProvider:
    """Obtém provider de secrets com cache TTL (singleton).

    Staging/production com GCP_PROJECT usam o Secret Manager; o resto lê
    variáveis de ambiente.
    """
    from app.infra.secrets import (
        DEFAULT_SECRET_TTL_SECONDS,
        CachedSecretProvider,
        EnvSecretProvider,
        GCPSecretProvider,
        SecretProviderProtocol,
        TTLCache,
    )

    base = get_base_settings()
    provider: SecretProviderProtocol
    if not base.is_development and base.gcp_project:
        provider = GCPSecretProvider(base.gcp_project, base.environment)
        backend = "gcp"
    else:
        provider = EnvSecretProvider()
        backend = "env"
    logger.info("secret_provider_created", extra={"backend": backend})
    return CachedSecretProvider(provider, TTLCache(DEFAULT_SECRET_TTL_SECONDS))


def resolve_openai_settings() -> OpenAISettings:
    """OpenAISettings com a api key do provider de secrets quando ausente."""
    settings = get_openai_settings()
    if settings.api_key or not settings.enabled:
        return settings
    api_key = get_secret_provider().get(OPENAI_API_KEY_SECRET) or ""
    return replace(settings, api_key=api_key)


def resolve_twilio_settings() -> TwilioSettings:
    """TwilioSettings com credenciais do provider de secrets quando ausentes."""
    settings = get_twilio_settings()
    if settings.account_sid and settings.auth_token:
        return settings
    secrets = get_secret_provider()
    return replace(
        settings,
        account_sid=settings.account_sid or secrets.get(TWILIO_ACCOUNT_SID_SECRET) or "",
        auth_token=settings.auth_token or secrets.get(TWILIO_AUTH_TOKEN_SECRET) or "",
    )


# ──────────────────────────────────────────────────────────────────────────────
# Getters (lazy initialization com cache)
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_template_table() -> ResponseTemplateTable:
    """Obtém a tabela de templates (carregada uma vez, somente leitura)."""
    from ai.config import get_template_table as load_default_table

    return load_default_table()


@lru_cache(maxsize=1)
def get_conversation_store() -> ConversationStoreProtocol:
    """Obtém o ConversationStore (singleton)."""
    from app.bootstrap.dependencies import create_conversation_store

    return create_conversation_store()


@lru_cache(maxsize=1)
def get_dedupe_store() -> AsyncDedupeProtocol:
    """Obtém store de dedupe de webhooks (singleton)."""
    from app.bootstrap.dependencies import create_dedupe_store

    return create_dedupe_store()


@lru_cache(maxsize=1)
def get_responders() -> tuple[OpenAIResponder, ...]:
    """Obtém colaboradores generativos na ordem de tentativa."""
    from app.bootstrap.dependencies import create_responders

    return tuple(create_responders(resolve_openai_settings()))


@lru_cache(maxsize=1)
def get_orchestrator() -> ConversationOrchestrator:
    """Obtém o orquestrador de mensagens inbound (singleton)."""
    from app.bootstrap.dependencies import create_orchestrator

    return create_orchestrator(
        store=get_conversation_store(),
        templates=get_template_table(),
        responders=list(get_responders()),
        generation_timeout_seconds=get_openai_settings().timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_conversation_manager() -> ConversationManager:
    """Obtém o caso de uso de gestão de conversas (singleton)."""
    from app.bootstrap.dependencies import create_conversation_manager

    return create_conversation_manager(get_conversation_store(), list(get_responders()))


@lru_cache(maxsize=1)
def get_outbound_dispatcher() -> OutboundDispatcher | None:
    """Obtém o dispatcher de SMS outbound; None sem credenciais."""
    from app.bootstrap.dependencies import create_outbound_dispatcher

    return create_outbound_dispatcher(resolve_twilio_settings())


def reset_dependencies() -> None:
    """Descarta singletons cacheados (testes e recarga de settings)."""
    for getter in (
        get_secret_provider,
        get_template_table,
        get_conversation_store,
        get_dedupe_store,
        get_responders,
        get_orchestrator,
        get_conversation_manager,
        get_outbound_dispatcher,
    ):
        getter.cache_clear()
