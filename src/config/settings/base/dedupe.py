"""Settings de dedupe de webhooks inbound.

O Twilio reenvia o webhook quando não recebe resposta a tempo. A chave de
dedupe é `sms:{MessageSid}`, gravada sob `key_prefix` no Redis.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

DedupeBackend = Literal["memory", "redis"]

DEFAULT_KEY_PREFIX = "riley:dedupe:"
# Retries do Twilio chegam em minutos; 24h cobre reprocessamentos manuais
DEFAULT_TTL_SECONDS = 86400


@dataclass(frozen=True)
class DedupeSettings:
    """Configurações de dedupe.

    Attributes:
        backend: memory (dev) ou redis (staging/production)
        ttl_seconds: Tempo que um MessageSid fica marcado como visto
        key_prefix: Namespace das chaves no Redis
    """

    backend: DedupeBackend = "memory"
    ttl_seconds: int = DEFAULT_TTL_SECONDS
    key_prefix: str = DEFAULT_KEY_PREFIX

    def validate(self, base: BaseSettings) -> list[str]:
        errors: list[str] = []

        if self.backend == "redis":
            if not base.redis_url:
                errors.append("DEDUPE_BACKEND=redis requer REDIS_URL configurado")
            if not self.key_prefix:
                errors.append("DEDUPE_KEY_PREFIX não pode ser vazio")
        elif self.backend == "memory":
            if not base.is_development:
                errors.append("DEDUPE_BACKEND=memory proibido em staging/production")
        else:
            errors.append(f"DEDUPE_BACKEND inválido: {self.backend}")

        if self.ttl_seconds <= 0:
            errors.append("DEDUPE_TTL_SECONDS deve ser > 0")

        return errors


def _parse_backend(raw: str) -> DedupeBackend:
    return "redis" if raw.strip().lower() == "redis" else "memory"


@lru_cache(maxsize=1)
def get_dedupe_settings() -> DedupeSettings:
    """Lê DEDUPE_BACKEND, DEDUPE_TTL_SECONDS e DEDUPE_KEY_PREFIX (cacheado)."""
    return DedupeSettings(
        backend=_parse_backend(os.getenv("DEDUPE_BACKEND", "memory")),
        ttl_seconds=int(os.getenv("DEDUPE_TTL_SECONDS", str(DEFAULT_TTL_SECONDS))),
        key_prefix=os.getenv("DEDUPE_KEY_PREFIX", DEFAULT_KEY_PREFIX),
    )
