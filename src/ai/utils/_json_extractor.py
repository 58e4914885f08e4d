"""Extrator de JSON de respostas de LLM.

Extrai JSON de respostas brutas que podem conter markdown ou texto adicional.
"""

from __future__ import annotations

import json
import re
from typing import Any

_FENCE_PREFIXES = ("```json", "```")
_OBJECT_PATTERN = re.compile(r"\{[^{}]*\}", re.DOTALL)


def extract_json_from_response(response: str | None) -> dict[str, Any] | None:
    """Extrai um objeto JSON de resposta de LLM.

    Trata casos comuns:
    - Resposta envolvida em markdown code blocks
    - Whitespace extra
    - JSON embutido em texto

    Returns:
        Dict extraído do JSON ou None se não encontrado
    """
    if not response or not isinstance(response, str):
        return None

    text = response.strip()
    for prefix in _FENCE_PREFIXES:
        if text.startswith(prefix):
            text = text[len(prefix):]
            break
    text = text.removesuffix("```").strip()

    data = _loads_object(text)
    if data is not None:
        return data

    # JSON embutido em texto livre
    for match in _OBJECT_PATTERN.findall(text):
        data = _loads_object(match)
        if data is not None:
            return data
    return None


def _loads_object(text: str) -> dict[str, Any] | None:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None
