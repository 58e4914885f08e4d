"""Secrets: integração com provedores de segredos.

Módulos disponíveis:
    - cache: TTLCache e CachedSecretProvider
    - gcp_secrets: Integração com Google Cloud Secret Manager
    - env_secrets: Fallback para variáveis de ambiente (dev only)
"""

from __future__ import annotations

from app.infra.secrets.cache import (
    DEFAULT_SECRET_TTL_SECONDS,
    MISS,
    CachedSecretProvider,
    SecretProviderProtocol,
    TTLCache,
)
from app.infra.secrets.env_secrets import EnvSecretProvider
from app.infra.secrets.gcp_secrets import GCPSecretProvider

__all__ = [
    "DEFAULT_SECRET_TTL_SECONDS",
    "MISS",
    "CachedSecretProvider",
    "EnvSecretProvider",
    "GCPSecretProvider",
    "SecretProviderProtocol",
    "TTLCache",
]
