"""Prompts do módulo AI.

Arquivos:
- riley_prompt.py: prompt de sistema, classificação de intenção e melhoria
  de resposta.
"""

from ai.prompts.riley_prompt import (
    build_chat_messages,
    build_system_prompt,
    format_classify_intent_prompt,
    format_improve_response_prompt,
)

__all__ = [
    "build_chat_messages",
    "build_system_prompt",
    "format_classify_intent_prompt",
    "format_improve_response_prompt",
]
