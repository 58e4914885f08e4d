"""Endpoints de health check para Cloud Run."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Sequence
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import Literal

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ai.core.client import GenerativeResponderProtocol
from app.bootstrap import SERVICE_NAME, get_conversation_store, get_dedupe_store, get_responders
from app.protocols.conversation_store import ConversationStoreProtocol
from app.protocols.dedupe import AsyncDedupeProtocol

logger = logging.getLogger(__name__)

router = APIRouter()

STORE_CHECK_TIMEOUT_SECONDS = 3.0
REDIS_CHECK_TIMEOUT_SECONDS = 2.0


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "degraded", "failed"]
    latency_ms: float | None = None
    error: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe: verifica se o serviço está rodando."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(
    store: ConversationStoreProtocol = Depends(get_conversation_store),
    dedupe: AsyncDedupeProtocol = Depends(get_dedupe_store),
    responders: Sequence[GenerativeResponderProtocol] = Depends(get_responders),
) -> JSONResponse:
    """Readiness probe com verificação real das dependências.

    Store e dedupe são críticos; sem LLM o serviço segue respondendo
    pelas regras (degraded).
    """
    store_check, redis_check = await asyncio.gather(
        _probe("store", _store_reachable(store), STORE_CHECK_TIMEOUT_SECONDS),
        _probe("redis", dedupe.ping(), REDIS_CHECK_TIMEOUT_SECONDS),
    )
    openai_check = (
        DependencyCheck(status="ok")
        if responders
        else DependencyCheck(status="degraded", error="not_configured")
    )

    ready = store_check.status == "ok" and redis_check.status == "ok"
    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "store": asdict(store_check),
            "redis": asdict(redis_check),
            "openai": asdict(openai_check),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    if not ready:
        logger.warning(
            "readiness_not_ready", extra={"store": store_check.status, "redis": redis_check.status}
        )
    return JSONResponse(content=payload, status_code=200 if ready else 503)


async def _store_reachable(store: ConversationStoreProtocol) -> bool:
    await store.list_recent(limit=1)
    return True


async def _probe(name: str, check: Awaitable[bool], timeout: float) -> DependencyCheck:
    """Executa `check` com timeout; False vira `ping_failed`."""
    started_at = time.perf_counter()
    try:
        alive = await asyncio.wait_for(check, timeout=timeout)
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        logger.warning(
            "readiness_check_failed",
            extra={"dependency": name, "error_type": type(exc).__name__},
        )
        return DependencyCheck(status="failed", error=type(exc).__name__)
    if not alive:
        return DependencyCheck(status="failed", error="ping_failed")
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))
