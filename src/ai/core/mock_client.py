"""Cliente mock do colaborador generativo para testes e desenvolvimento.

Respostas determinísticas sem chamar LLM real.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ai.models.generation import IntentClassification
from ai.rules.message_analyzer import analyze_message

if TYPE_CHECKING:
    from ai.models.generation import GenerationContext


class MockResponder:
    """Implementa GenerativeResponderProtocol de forma determinística.

    `reply` fixa o texto retornado por `generate`; sem ele, o texto é
    derivado do nome da empresa e da intenção detectada por regras.
    """

    def __init__(self, reply: str | None = None, *, name: str = "mock") -> None:
        self._reply = reply
        self._name = name
        self.calls: list[tuple[str, GenerationContext]] = []

    @property
    def name(self) -> str:
        return self._name

    async def generate(self, prompt: str, context: GenerationContext) -> str:
        """Retorna resposta mock predefinida."""
        self.calls.append((prompt, context))
        if self._reply is not None:
            return self._reply
        intent = analyze_message(prompt).intent
        return f"Thanks for contacting {context.company_name}! ({intent.value})"

    async def classify_intent(self, text: str) -> IntentClassification:
        """Mapeia a intenção das regras para o vocabulário da classificação."""
        analysis = analyze_message(text)
        intent = {
            "appointment": "booking",
            "complaint": "complaint",
        }.get(analysis.intent.value, "question" if analysis.has_question else "other")
        return IntentClassification(
            intent=intent,
            sentiment=analysis.sentiment.value,
            urgency=analysis.urgency.value,
            suggested_action="Mock: classificação por keywords",
        )

    async def improve_response(self, original: str, feedback: str) -> str:
        return original
