"""Implementações concretas de IO para IA.

ai/ não faz IO direto; o cliente HTTP do LLM fica aqui.
"""

from app.infra.ai.openai_client import OpenAIResponder

__all__ = ["OpenAIResponder"]
