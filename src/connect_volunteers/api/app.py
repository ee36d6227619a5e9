"""Fábrica da aplicação FastAPI.

Uso (uvicorn):
    uvicorn connect_volunteers.api.app:create_app --factory
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from connect_volunteers.api.routes import router
from connect_volunteers.bootstrap import Runtime, build_runtime
from connect_volunteers.config.settings import Settings, get_settings
from connect_volunteers.observability.logging import configure_logging, get_logger
from connect_volunteers.observability.middleware import CorrelationIdMiddleware

logger = get_logger(__name__)


def create_app(settings: Settings | None = None, runtime: Runtime | None = None) -> FastAPI:
    """Cria a aplicação FastAPI.

    Raises:
        ValueError: configuração inválida (nunca sobe parcialmente)
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.service_name)

    runtime = runtime or build_runtime(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await runtime.close()
        logger.info("runtime_closed")

    app = FastAPI(title=settings.service_name, version=settings.version, lifespan=lifespan)
    app.add_middleware(CorrelationIdMiddleware)
    app.include_router(router)

    app.state.settings = settings
    app.state.runtime = runtime
    return app
