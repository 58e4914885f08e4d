"""Protocolos de domínio para stores de dedupe.

Interfaces leves (ABCs) dependidas por Application.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class AsyncDedupeProtocol(ABC):
    """Contrato mínimo assíncrono para stores de deduplicação.

    Métodos canônicos:
    - seen(key, ttl) -> bool
      Verifica e marca de forma atômica; True se a chave já existia.
    - is_duplicate(key) -> bool
      Somente leitura.
    """

    @abstractmethod
    async def seen(self, key: str, ttl: int) -> bool:
        """Verifica e marca a chave de forma atômica.

        Args:
            key: Chave única (ex.: MessageSid do Twilio)
            ttl: TTL em segundos

        Returns:
            True se já foi vista (duplicado); False se foi marcada agora (novo).
        """

    @abstractmethod
    async def is_duplicate(self, key: str) -> bool:
        """Verifica se a chave já foi processada (sem marcar)."""

    async def ping(self) -> bool:
        """Health check do backend; stores em memória estão sempre prontos."""
        return True
