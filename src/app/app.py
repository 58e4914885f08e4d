"""Entrypoint da aplicação Riley.

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080

Cloud Run:
    O container deve expor a porta 8080 (padrão do Cloud Run).
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import create_api_router
from app.bootstrap import (
    SERVICE_NAME,
    get_outbound_dispatcher,
    get_responders,
    get_template_table,
    initialize_app,
    validate_runtime_settings,
)
from app.observability import CorrelationIdMiddleware
from config.logging import get_logger
from config.settings import get_base_settings, get_dedupe_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)

SHUTDOWN_DRAIN_TIMEOUT_SECONDS = 30.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações (falha rápido em staging/production)
    - Carrega a tabela de templates (erro de asset derruba o boot)
    - Cria o dispatcher outbound

    Shutdown:
    - Aguarda envios outbound pendentes
    - Fecha clientes (OpenAI, Redis)
    """
    logger.info("app_starting", extra={"service": SERVICE_NAME})
    validate_runtime_settings()
    templates = get_template_table()
    app.state.outbound_dispatcher = get_outbound_dispatcher()
    logger.info("app_ready", extra={"service": SERVICE_NAME, "templates": len(templates)})

    yield

    logger.info("app_shutting_down", extra={"service": SERVICE_NAME})
    dispatcher = app.state.outbound_dispatcher
    if dispatcher is not None:
        await dispatcher.drain(timeout_seconds=SHUTDOWN_DRAIN_TIMEOUT_SECONDS)
    for responder in get_responders():
        await responder.close()
    if get_dedupe_settings().backend == "redis":
        from app.bootstrap.clients import create_async_redis_client

        await create_async_redis_client().aclose()


async def _request_validation_handler(
    _request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Body malformado vira 400 `{error}` nomeando o primeiro campo."""
    errors = exc.errors()
    location = errors[0].get("loc", ()) if errors else ()
    field = next((str(part) for part in reversed(location) if part != "body"), "body")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": f"Invalid value for {field}"},
    )


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI."""
    fastapi_app = FastAPI(
        title="Riley",
        description="Assistente conversacional de atendimento (SMS e web)",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=list(get_base_settings().cors_allowed_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    fastapi_app.add_middleware(CorrelationIdMiddleware)
    fastapi_app.add_exception_handler(RequestValidationError, _request_validation_handler)

    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": SERVICE_NAME})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("riley_starting_dev_mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=get_base_settings().port,
        reload=True,
    )


if __name__ == "__main__":
    main()
