"""Factories dos clientes de SDK usados pelo Riley.

- Redis assíncrono (dedupe de webhooks), singleton, fechado no shutdown
- Firestore (conversas), singleton
- Twilio REST (envio outbound), cacheado pelo getter do composition root

Os SDKs são importados dentro das factories: dev e testes com backends em
memória não pagam o import do google-cloud nem do redis.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from config.settings import get_base_settings, get_firestore_settings

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient
    from redis.asyncio import Redis as AsyncRedis
    from twilio.rest import Client as TwilioClient

    from config.settings.sms import TwilioSettings

logger = logging.getLogger(__name__)

# O webhook SMS responde em segundos; Redis lento não pode segurar o TwiML
REDIS_SOCKET_TIMEOUT_SECONDS = 2.0


@lru_cache(maxsize=1)
def create_async_redis_client() -> AsyncRedis[bytes]:
    """Cliente Redis a partir de REDIS_URL.

    Raises:
        ValueError: REDIS_URL ausente
    """
    from redis.asyncio import Redis as AsyncRedis

    url = get_base_settings().redis_url
    if not url:
        raise ValueError("REDIS_URL não configurado")

    client: AsyncRedis[bytes] = AsyncRedis.from_url(
        url,
        socket_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
        socket_connect_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
        health_check_interval=30,
    )
    pool_kwargs = client.connection_pool.connection_kwargs
    logger.info(
        "async_redis_client_created",
        extra={"host": pool_kwargs.get("host", "unknown"), "db": pool_kwargs.get("db", 0)},
    )
    return client


@lru_cache(maxsize=1)
def create_firestore_client() -> FirestoreClient:
    """Cliente Firestore no projeto/banco configurados."""
    from google.cloud import firestore

    settings = get_firestore_settings()
    project = settings.resolve_project(get_base_settings().gcp_project)
    client = firestore.Client(project=project or None, database=settings.database)
    logger.info(
        "firestore_client_created",
        extra={"project": project, "database": settings.database},
    )
    return client


def create_sms_client(settings: TwilioSettings) -> TwilioClient:
    """Cliente Twilio REST para envio outbound.

    Raises:
        ValueError: credenciais de envio incompletas
    """
    from app.infra.sms import create_twilio_client

    if not settings.can_send:
        msg = "TWILIO_ACCOUNT_SID/TWILIO_AUTH_TOKEN/TWILIO_FROM_NUMBER não configurados"
        raise ValueError(msg)
    client = create_twilio_client(settings)
    logger.info("twilio_client_created", extra={"timeout": settings.request_timeout_seconds})
    return client
