"""Agregador de rotas: registra todos os routers da API.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.conversations.router import router as conversations_router
from api.routes.health.router import router as health_router
from api.routes.messages.router import router as messages_router
from api.routes.sms.router import router as sms_router


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados."""
    api_router = APIRouter()

    # Health checks (sem prefixo para /health e /ready na raiz)
    api_router.include_router(health_router, tags=["health"])

    # Canais inbound
    api_router.include_router(messages_router, tags=["messages"])
    api_router.include_router(sms_router, tags=["sms"])

    # Operador/dashboard
    api_router.include_router(
        conversations_router,
        prefix="/conversations",
        tags=["conversations"],
    )

    return api_router
