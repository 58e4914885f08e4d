"""Core do módulo AI.

Exporta o protocolo do colaborador generativo e o mock.
A implementação OpenAI está em app/infra/ai/ (IO).
"""

from ai.core.client import GenerativeResponderProtocol
from ai.core.mock_client import MockResponder

__all__ = [
    "GenerativeResponderProtocol",
    "MockResponder",
]
