"""Settings do colaborador generativo (OpenAI chat completions).

Dois provedores podem ser configurados: o primário e um secundário
(outro modelo e/ou outro endpoint compatível). Cada um é tentado uma vez
antes do fallback para as regras determinísticas.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

OPENAI_BASE_URL = "https://api.openai.com/v1"


@dataclass(frozen=True)
class OpenAISettings:
    """Configurações do OpenAI.

    Attributes:
        api_key: Chave da API OpenAI
        model: Modelo do provedor primário
        base_url: Endpoint do provedor primário
        fallback_model: Modelo do provedor secundário ("" desativa)
        fallback_base_url: Endpoint do provedor secundário
        timeout_seconds: Timeout por chamada (antes do fallback para regras)
        max_tokens: Limite de tokens na resposta
        temperature: Temperatura de geração
        enabled: Se a geração via LLM está habilitada
    """

    api_key: str = ""
    model: str = "gpt-4o-mini"
    base_url: str = OPENAI_BASE_URL
    fallback_model: str = ""
    fallback_base_url: str = OPENAI_BASE_URL
    timeout_seconds: float = 5.0
    max_tokens: int = 150
    temperature: float = 0.7
    enabled: bool = False

    @property
    def has_fallback_provider(self) -> bool:
        """Retorna True se o provedor secundário está configurado."""
        return bool(self.fallback_model)

    def validate(self) -> list[str]:
        """Valida configurações do OpenAI.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.enabled and not self.api_key:
            errors.append("OPENAI_API_KEY não configurado mas OPENAI_ENABLED=true")

        if self.timeout_seconds <= 0:
            errors.append("OPENAI_TIMEOUT_SECONDS deve ser > 0")

        if self.max_tokens <= 0:
            errors.append("OPENAI_MAX_TOKENS deve ser > 0")

        if not 0.0 <= self.temperature <= 2.0:
            errors.append("OPENAI_TEMPERATURE deve estar entre 0.0 e 2.0")

        return errors


def _load_openai_from_env() -> OpenAISettings:
    """Carrega OpenAISettings de variáveis de ambiente."""
    return OpenAISettings(
        api_key=os.getenv("OPENAI_API_KEY", ""),
        model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        base_url=os.getenv("OPENAI_BASE_URL", OPENAI_BASE_URL),
        fallback_model=os.getenv("OPENAI_FALLBACK_MODEL", ""),
        fallback_base_url=os.getenv("OPENAI_FALLBACK_BASE_URL", OPENAI_BASE_URL),
        timeout_seconds=float(os.getenv("OPENAI_TIMEOUT_SECONDS", "5")),
        max_tokens=int(os.getenv("OPENAI_MAX_TOKENS", "150")),
        temperature=float(os.getenv("OPENAI_TEMPERATURE", "0.7")),
        enabled=os.getenv("OPENAI_ENABLED", "false").lower() in ("true", "1", "yes"),
    )


@lru_cache(maxsize=1)
def get_openai_settings() -> OpenAISettings:
    """Retorna instância cacheada de OpenAISettings."""
    return _load_openai_from_env()
