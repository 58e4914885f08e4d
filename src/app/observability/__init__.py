"""Observabilidade: correlation id e métricas via logs estruturados.

Uso:
    from app.observability import get_correlation_id, set_correlation_id
    from app.observability import record_latency, record_reply_source
"""

from app.observability.correlation import (
    CORRELATION_HEADER,
    CorrelationIdMiddleware,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import (
    record_escalation,
    record_latency,
    record_reply_source,
    record_token_usage,
)

__all__ = [
    "CORRELATION_HEADER",
    "CorrelationIdMiddleware",
    "generate_correlation_id",
    "get_correlation_id",
    "record_escalation",
    "record_latency",
    "record_reply_source",
    "record_token_usage",
    "reset_correlation_id",
    "set_correlation_id",
]
