"""Serialização por participante.

Um `asyncio.Lock` por participant_id, criado sob demanda e descartado
quando nenhuma task o usa. Mensagens de participantes diferentes seguem
em paralelo; do mesmo participante, em ordem de chegada.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


class ParticipantLocks:
    """Registro de locks por participante (single event loop)."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, participant_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(participant_id, asyncio.Lock())
        self._waiters[participant_id] = self._waiters.get(participant_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._waiters[participant_id] - 1
            if remaining:
                self._waiters[participant_id] = remaining
            else:
                del self._waiters[participant_id]
                del self._locks[participant_id]
