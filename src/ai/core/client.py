"""Protocolo do colaborador generativo (LLM).

Define o contrato GenerativeResponderProtocol para implementações concretas.
ai/ não faz IO direto: a implementação HTTP fica em app/infra/ai/.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ai.models.generation import GenerationContext, IntentClassification


class GenerativeResponderProtocol(Protocol):
    """Protocolo para clientes de geração de resposta.

    Permite injeção de dependência e testabilidade (OpenAI, mock, etc.).
    """

    @property
    def name(self) -> str:
        """Identificador do provedor/modelo (logs e reply_source)."""
        ...

    @abstractmethod
    async def generate(self, prompt: str, context: GenerationContext) -> str:
        """Gera texto de resposta.

        Args:
            prompt: Mensagem do usuário
            context: Contexto do negócio e histórico recente

        Returns:
            Texto gerado (não vazio)

        Raises:
            CollaboratorUnavailableError: Timeout, erro HTTP ou resposta vazia
        """
        ...

    @abstractmethod
    async def classify_intent(self, text: str) -> IntentClassification:
        """Classifica intenção de forma best-effort.

        Falhas de parsing retornam a classificação default, nunca levantam.
        """
        ...
