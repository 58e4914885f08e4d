"""Settings base do Riley (ambiente, GCP, Redis e HTTP).

Tudo que não pertence a um canal ou colaborador específico fica aqui.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]

ENVIRONMENT_ALIASES: dict[str, Environment] = {
    "production": "production",
    "prod": "production",
    "staging": "staging",
    "stage": "staging",
}
LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
REDIS_SCHEMES = ("redis://", "rediss://")


@dataclass(frozen=True)
class BaseSettings:
    """Configurações base do serviço.

    Attributes:
        environment: Ambiente de execução (development|staging|production)
        service_name: Nome do serviço nos logs
        log_level: Nível do logging estruturado
        gcp_project: Projeto GCP (Firestore e Secret Manager)
        redis_url: URL do Redis usado no dedupe de webhooks
        cors_allowed_origins: Origens liberadas para o widget web
        port: Porta HTTP (Cloud Run injeta PORT)
    """

    environment: Environment = "development"
    service_name: str = "riley"
    log_level: str = "INFO"
    gcp_project: str = ""
    redis_url: str = ""
    cors_allowed_origins: tuple[str, ...] = ("*",)
    port: int = 8080

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def validate(self) -> list[str]:
        """Valida configurações base.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")

        if self.log_level not in LOG_LEVELS:
            errors.append(f"LOG_LEVEL inválido: {self.log_level}")

        if self.redis_url and not self.redis_url.startswith(REDIS_SCHEMES):
            errors.append("REDIS_URL deve começar com redis:// ou rediss://")

        if not 0 < self.port < 65536:
            errors.append(f"PORT fora do intervalo: {self.port}")

        if self.is_production and "*" in self.cors_allowed_origins:
            errors.append("CORS_ALLOWED_ORIGINS=* não permitido em production")

        return errors


def _parse_environment(raw: str) -> Environment:
    return ENVIRONMENT_ALIASES.get(raw.strip().lower(), "development")


def _parse_origins(raw: str) -> tuple[str, ...]:
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


def _load_base_from_env() -> BaseSettings:
    """Carrega BaseSettings de variáveis de ambiente."""
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "riley"),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        gcp_project=os.getenv("GCP_PROJECT", os.getenv("GOOGLE_CLOUD_PROJECT", "")),
        redis_url=os.getenv("REDIS_URL", ""),
        cors_allowed_origins=_parse_origins(os.getenv("CORS_ALLOWED_ORIGINS", "*")),
        port=int(os.getenv("PORT", "8080")),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
