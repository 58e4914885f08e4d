"""Entrega outbound em background (fire-and-forget).

Cada envio vira uma task rastreada, com limite de concorrência por
semáforo. Falhas são logadas e descartadas; `drain` aguarda as tasks
pendentes no shutdown.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.protocols.outbound_sender import DeliverySenderProtocol

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT_SENDS = 100


class OutboundDispatcher:
    """Agenda envios outbound sem bloquear o fluxo de resposta."""

    def __init__(
        self,
        sender: DeliverySenderProtocol,
        *,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT_SENDS,
    ) -> None:
        self._sender = sender
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._active_tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        return len(self._active_tasks)

    def dispatch(self, destination: str, body: str, conversation_id: str) -> asyncio.Task[Any]:
        """Agenda o envio e retorna a task (já rastreada)."""
        task = asyncio.create_task(self._send_with_limit(destination, body, conversation_id))
        self._active_tasks.add(task)
        task.add_done_callback(self._on_task_done)
        logger.info(
            "outbound_send_scheduled",
            extra={
                "conversation_id": conversation_id,
                "active_tasks": len(self._active_tasks),
            },
        )
        return task

    async def _send_with_limit(self, destination: str, body: str, conversation_id: str) -> None:
        async with self._semaphore:
            await self._sender.send(destination, body, conversation_id)

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._active_tasks.discard(task)
        with contextlib.suppress(asyncio.CancelledError):
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "outbound_send_failed",
                    extra={
                        "error_type": type(exc).__name__,
                        "active_tasks": len(self._active_tasks),
                    },
                )

    async def drain(self, timeout_seconds: float = 30.0) -> None:
        """Aguarda tasks pendentes durante shutdown do processo."""
        if not self._active_tasks:
            return

        pending_now = list(self._active_tasks)
        logger.info(
            "outbound_shutdown_wait",
            extra={"pending_tasks": len(pending_now), "timeout_seconds": timeout_seconds},
        )
        _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
        if not pending:
            return

        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.warning("outbound_shutdown_cancelled", extra={"cancelled_tasks": len(pending)})

