"""Prompts do assistente Riley.

Builders puros: recebem contexto e retornam strings/mensagens prontas
para o endpoint de chat completions. Sem IO.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ai.models.generation import GenerationContext

DEFAULT_COMPANY_NAME = "Panda Exteriors"
DEFAULT_PERSONALITY = "Be professional, friendly, and helpful."

CLASSIFY_INTENT_TEMPLATE = """Analyze this customer message and determine the intent.
Message: "{message}"

Return a JSON object with:
- intent: (booking, question, complaint, feedback, other)
- sentiment: (positive, neutral, negative)
- urgency: (low, medium, high)
- suggestedAction: (brief suggestion for response)"""

IMPROVE_RESPONSE_TEMPLATE = """Improve this customer service response based on feedback.
Original response: "{original}"
Feedback: "{feedback}"

Generate an improved response that addresses the feedback while maintaining professionalism."""


def build_system_prompt(context: GenerationContext) -> str:
    """Monta o prompt de sistema a partir do contexto do negócio."""
    lines = [
        f"You are Riley, a helpful AI assistant for "
        f"{context.company_name or DEFAULT_COMPANY_NAME}.",
        context.personality or DEFAULT_PERSONALITY,
    ]
    if context.company_details:
        lines.append(f"Company info: {json.dumps(context.company_details, ensure_ascii=False)}")
    if context.negative_filters:
        lines.append(f"Avoid these phrases: {', '.join(context.negative_filters)}")
    return "\n".join(lines)


def build_chat_messages(prompt: str, context: GenerationContext) -> list[dict[str, str]]:
    """Mensagens do chat: sistema, histórico (mais antigo primeiro), usuário."""
    messages = [{"role": "system", "content": build_system_prompt(context)}]
    messages.extend(
        {"role": turn.role or "assistant", "content": turn.content}
        for turn in context.thread_history
    )
    messages.append({"role": "user", "content": prompt})
    return messages


def format_classify_intent_prompt(message: str) -> str:
    return CLASSIFY_INTENT_TEMPLATE.format(message=message)


def format_improve_response_prompt(original: str, feedback: str) -> str:
    return IMPROVE_RESPONSE_TEMPLATE.format(original=original, feedback=feedback)
