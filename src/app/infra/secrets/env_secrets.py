"""Secrets lidos de variáveis de ambiente (desenvolvimento local e CI).

O nome do secret vira a variável em maiúsculas: `twilio-auth-token` →
`TWILIO_AUTH_TOKEN` (com prefixo opcional, ex.: `RILEY_TWILIO_AUTH_TOKEN`).
Staging/production com GCP_PROJECT usam o GCPSecretProvider.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


def env_var_name(key: str, prefix: str = "") -> str:
    name = key.strip().upper().replace("-", "_")
    return f"{prefix.upper().rstrip('_')}_{name}" if prefix else name


class EnvSecretProvider:
    """Implementa SecretProviderProtocol sobre `os.environ`.

    Valores vazios ou só com espaços contam como ausentes (Cloud Run
    exporta variáveis declaradas sem valor como "").
    """

    def __init__(self, prefix: str = "", *, environ: Mapping[str, str] | None = None) -> None:
        self._prefix = prefix
        self._environ = environ if environ is not None else os.environ

    def get(self, key: str, default: str | None = None) -> str | None:
        name = env_var_name(key, self._prefix)
        value = (self._environ.get(name) or "").strip()
        if not value:
            logger.debug("env_secret_not_found", extra={"key": key, "env_key": name})
            return default
        return value
