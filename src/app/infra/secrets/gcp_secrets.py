"""GCP Secret Manager: integração com Google Cloud Secret Manager.

Provedor de secrets para staging/production. Sem cache próprio: o cache
TTL é um colaborador separado (CachedSecretProvider).
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import TYPE_CHECKING

from google.api_core.exceptions import GoogleAPIError, NotFound

if TYPE_CHECKING:
    from google.cloud.secretmanager import SecretManagerServiceClient

logger = logging.getLogger(__name__)


def create_secret_manager_client() -> SecretManagerServiceClient:
    """Cria cliente do Secret Manager."""
    from google.cloud import secretmanager

    return secretmanager.SecretManagerServiceClient()


class GCPSecretProvider:
    """Provedor de secrets usando GCP Secret Manager.

    Ex.: key="twilio-auth-token", environment="staging" →
    secret `twilio-auth-token-staging`.

    Args:
        project_id: ID do projeto GCP (default: env GCP_PROJECT)
        environment: Ambiente para sufixo do secret ("" desativa)
        client: Cliente do Secret Manager (injetável em testes)
    """

    def __init__(
        self,
        project_id: str | None = None,
        environment: str = "staging",
        *,
        client: SecretManagerServiceClient | None = None,
    ) -> None:
        self._project_id = project_id or os.getenv("GCP_PROJECT", "")
        self._suffix = f"-{environment}" if environment else ""
        self._client = client

    def _secret_name(self, key: str, version: str = "latest") -> str:
        return f"projects/{self._project_id}/secrets/{key}{self._suffix}/versions/{version}"

    def get(self, key: str, default: str | None = None) -> str | None:
        """Obtém secret por nome.

        NotFound retorna default; demais erros da API propagam.
        """
        if self._client is None:
            self._client = create_secret_manager_client()
        name = self._secret_name(key)
        try:
            response = self._client.access_secret_version(request={"name": name})
        except NotFound:
            logger.warning("secret_not_found", extra={"key": key})
            return default
        except GoogleAPIError as exc:
            logger.error(
                "secret_load_error",
                extra={"key": key, "error_type": type(exc).__name__},
            )
            raise
        logger.debug("secret_loaded", extra={"key": key})
        return response.payload.data.decode("UTF-8")

    async def get_async(self, key: str, default: str | None = None) -> str | None:
        """Versão async (SDK síncrono roda em thread)."""
        return await asyncio.to_thread(self.get, key, default)
