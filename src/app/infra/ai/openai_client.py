"""Cliente OpenAI real para produção.

Implementa GenerativeResponderProtocol com chamadas ao endpoint de chat
completions (SDK `openai`, AsyncOpenAI). Implementação de IO: pertence a
app/infra; os prompts são montados em ai/prompts.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from openai import AsyncOpenAI, OpenAIError

from ai.models.generation import GenerationContext, IntentClassification
from ai.prompts.riley_prompt import (
    build_chat_messages,
    format_classify_intent_prompt,
    format_improve_response_prompt,
)
from ai.rules.fallbacks import fallback_intent_classification
from ai.utils._json_extractor import extract_json_from_response
from app.observability import record_token_usage
from config.settings.ai.openai import OpenAISettings, get_openai_settings
from utils.errors import CollaboratorUnavailableError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


class OpenAIResponder:
    """Colaborador generativo via OpenAI chat completions.

    Erros de rede, timeout, status HTTP e respostas vazias viram
    CollaboratorUnavailableError; quem decide o fallback é o orquestrador.
    """

    __slots__ = ("_client", "_max_tokens", "_model", "_name", "_temperature")

    def __init__(
        self,
        *,
        settings: OpenAISettings | None = None,
        model: str | None = None,
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
        name: str | None = None,
    ) -> None:
        cfg = settings or get_openai_settings()
        self._model = model or cfg.model
        self._max_tokens = cfg.max_tokens
        self._temperature = cfg.temperature
        self._name = name or f"openai:{self._model}"
        if client is not None:
            self._client = client
        else:
            self._client = AsyncOpenAI(
                api_key=cfg.api_key,
                base_url=base_url or cfg.base_url,
                timeout=cfg.timeout_seconds,
                max_retries=0,
            )

    @property
    def name(self) -> str:
        return self._name

    async def generate(self, prompt: str, context: GenerationContext) -> str:
        """Gera resposta com prompt de sistema + histórico + mensagem."""
        return await self._complete(build_chat_messages(prompt, context))

    async def classify_intent(self, text: str) -> IntentClassification:
        """Classificação best-effort; JSON inválido retorna o default."""
        raw = await self._complete(
            build_chat_messages(format_classify_intent_prompt(text), GenerationContext())
        )
        data = extract_json_from_response(raw)
        if data is None:
            logger.warning("openai_classify_parse_failed", extra={"provider": self._name})
            return fallback_intent_classification()
        return _classification_from_dict(data)

    async def improve_response(self, original: str, feedback: str) -> str:
        """Reescreve uma resposta a partir do feedback do operador."""
        return await self._complete(
            build_chat_messages(
                format_improve_response_prompt(original, feedback),
                GenerationContext(),
            )
        )

    async def close(self) -> None:
        await self._client.close()

    async def _complete(self, messages: list[dict[str, str]]) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,  # type: ignore[arg-type]
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except OpenAIError as exc:
            logger.warning(
                "openai_call_failed",
                extra={"provider": self._name, "error_type": type(exc).__name__},
            )
            raise CollaboratorUnavailableError(self._name, type(exc).__name__) from exc

        content = _extract_content(response)
        if not content:
            logger.warning("openai_empty_response", extra={"provider": self._name})
            raise CollaboratorUnavailableError(self._name, "empty_response")

        usage = getattr(response, "usage", None)
        if usage is not None:
            record_token_usage(
                self._name,
                prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
                total_tokens=getattr(usage, "total_tokens", 0) or 0,
            )
        logger.debug("openai_call_success", extra={"provider": self._name})
        return content


def _extract_content(response: Any) -> str:
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    return (getattr(message, "content", None) or "").strip()


def _classification_from_dict(data: Mapping[str, Any]) -> IntentClassification:
    default = IntentClassification()
    return IntentClassification(
        intent=str(data.get("intent") or default.intent),
        sentiment=str(data.get("sentiment") or default.sentiment),
        urgency=str(data.get("urgency") or default.urgency),
        suggested_action=str(data.get("suggestedAction") or default.suggested_action),
    )
