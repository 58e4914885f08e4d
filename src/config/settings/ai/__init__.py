"""Agregador de settings de AI/LLM."""

from __future__ import annotations

from config.settings.ai.openai import (
    OPENAI_BASE_URL,
    OpenAISettings,
    get_openai_settings,
)

__all__ = [
    "OPENAI_BASE_URL",
    "OpenAISettings",
    "get_openai_settings",
]
