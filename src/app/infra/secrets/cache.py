"""Cache com TTL para valores de secrets.

Colaborador explícito, criado e injetado pelo composition root; não há
cache global no processo. O relógio é injetável para testes.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Final, Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_SECRET_TTL_SECONDS: Final = 300.0

V = TypeVar("V")


class _Miss:
    """Sentinela de ausência no cache (distinta de None)."""

    _instance: _Miss | None = None

    def __new__(cls) -> _Miss:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False


MISS: Final = _Miss()


class TTLCache(Generic[V]):
    """Cache chave → valor com expiração absoluta por entrada.

    `get` retorna o valor ou `MISS` (entrada ausente ou expirada).
    Thread-safe: providers síncronos rodam em `asyncio.to_thread`.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_SECRET_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds deve ser > 0")
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[V, float]] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> V | _Miss:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return MISS
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return MISS
            return value

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + self._ttl)

    def invalidate(self, key: str | None = None) -> None:
        """Remove uma chave (ou todas, quando key=None)."""
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)


class SecretProviderProtocol(Protocol):
    """Contrato mínimo de provedor de secrets."""

    def get(self, key: str, default: str | None = None) -> str | None: ...


class CachedSecretProvider:
    """Provider com cache TTL na frente de outro provider.

    Apenas valores encontrados são cacheados; ausências consultam o
    provider de novo na próxima chamada.
    """

    def __init__(self, provider: SecretProviderProtocol, cache: TTLCache[str]) -> None:
        self._provider = provider
        self._cache = cache

    def get(self, key: str, default: str | None = None) -> str | None:
        cached = self._cache.get(key)
        if not isinstance(cached, _Miss):
            return cached
        value = self._provider.get(key)
        if value is None:
            return default
        self._cache.set(key, value)
        logger.debug("secret_cached", extra={"key": key, "ttl": self._cache.ttl_seconds})
        return value

    def require(self, key: str) -> str:
        """Obtém secret obrigatório.

        Raises:
            ValueError: Se o secret não existe no provider
        """
        value = self.get(key)
        if value is None:
            msg = f"Secret obrigatório não encontrado: {key}"
            raise ValueError(msg)
        return value

    def invalidate(self, key: str | None = None) -> None:
        self._cache.invalidate(key)
