"""Redis Dedupe Store: deduplicação de webhooks inbound.

Usa SET NX EX (set if not exists) para operação atômica: retries do
provedor com o mesmo MessageSid não geram resposta duplicada.

Contrato de Keys:
    As keys devem ser IDs opacos (ex.: MessageSid).
    NUNCA passar dados sensíveis (PII, telefones, emails) como key.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from redis.exceptions import RedisError

from app.protocols.dedupe import AsyncDedupeProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

DEDUPE_PREFIX = "riley:dedupe:"


def _mask_key(key: str) -> str:
    return key[:8] + "..." if len(key) > 8 else key


class RedisDedupeStore(AsyncDedupeProtocol):
    """Store de dedupe usando Redis assíncrono.

    Args:
        redis_client: Cliente Redis assíncrono
        prefix: Namespace das chaves (DEDUPE_KEY_PREFIX)
    """

    def __init__(self, redis_client: AsyncRedis[bytes], prefix: str = DEDUPE_PREFIX) -> None:
        self._redis = redis_client
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def seen(self, key: str, ttl: int) -> bool:
        """Verifica e marca chave atomicamente.

        - Se chave não existe: cria com TTL e retorna False (novo)
        - Se chave existe: retorna True (duplicado)

        Raises:
            RedisConnectionError: Falha de conexão/timeout
        """
        try:
            # SET NX retorna True se criou (novo), None se já existia
            was_set = await self._redis.set(self._key(key), "1", nx=True, ex=ttl)
        except RedisError as exc:
            raise RedisConnectionError("Falha ao marcar dedupe no Redis") from exc
        is_duplicate = not was_set
        if is_duplicate:
            logger.debug("dedupe_duplicate_detected", extra={"key": _mask_key(key)})
        return is_duplicate

    async def is_duplicate(self, key: str) -> bool:
        try:
            return bool(await self._redis.exists(self._key(key)))
        except RedisError as exc:
            raise RedisConnectionError("Falha ao consultar dedupe no Redis") from exc

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except RedisError:
            logger.warning("redis_ping_failed")
            return False
