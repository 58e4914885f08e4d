"""Configuração de logging estruturado.

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="riley")
    logger = get_logger(__name__)
    logger.info("reply_generated", extra={"source": "rules"})

Todo log carrega correlation_id e service. Sem PII (telefone/email mascarados).
"""

from config.logging.config import configure_logging, get_logger, log_fallback
from config.logging.filters import (
    CorrelationIdFilter,
    ParticipantMaskingFilter,
    mask_participant,
)
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "ParticipantMaskingFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_fallback",
    "mask_participant",
]
