"""Métricas do Riley emitidas como logs estruturados.

Cada métrica é um log `metric_<tipo>` com `metric_type` no extra; o
Cloud Logging agrega via log-based metrics.

- latency: duração por componente/operação
- escalation: conversa sinalizada para humano, com motivo
- reply_source: origem da resposta (rules, generative, fallback...)
- token_usage: custo de cada chamada ao colaborador generativo
"""

from __future__ import annotations

import logging

from app.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)


def _emit(metric_type: str, correlation_id: str | None = None, **fields: object) -> None:
    fields["metric_type"] = metric_type
    fields["correlation_id"] = correlation_id or get_correlation_id()
    logger.info("metric_%s", metric_type, extra=fields)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "orchestrator", "sms_webhook")
        operation: Nome da operação (ex: "handle_inbound")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação (default: o do contexto atual)
    """
    _emit(
        "latency",
        correlation_id,
        component=component,
        operation=operation,
        latency_ms=round(latency_ms, 2),
    )


def record_escalation(reason: str, conversation_id: str, channel: str | None = None) -> None:
    """Conta conversa sinalizada para humano (emergency, high_urgency, complaint)."""
    _emit(
        "escalation",
        component="orchestrator",
        reason=reason,
        conversation_id=conversation_id,
        channel=channel,
    )


def record_reply_source(source: str, channel: str) -> None:
    _emit("reply_source", component="orchestrator", source=source, channel=channel)


def record_token_usage(
    provider: str,
    prompt_tokens: int,
    completion_tokens: int,
    total_tokens: int,
) -> None:
    """Registra uso de tokens (custo) de uma chamada ao LLM."""
    _emit(
        "token_usage",
        component="generative_responder",
        provider=provider,
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=total_tokens,
    )
