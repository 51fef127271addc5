"""
Punto de entrada de la API del dashboard SISDNA.

Este módulo configura la aplicación FastAPI con todas las rutas,
middlewares y handlers de excepción.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from demuna.api.v1.router import api_router
from demuna.core.config import settings
from demuna.core.logging import setup_logging
from demuna.core.middleware import RequestContextMiddleware, setup_exception_handlers
from demuna.db.session import engine

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gestiona el ciclo de vida de la aplicación."""
    # Startup
    setup_logging()
    logger.info("Iniciando SISDNA Dashboard API", version=settings.VERSION)

    yield

    # Shutdown
    await engine.dispose()
    logger.info("Deteniendo SISDNA Dashboard API")


def create_application() -> FastAPI:
    """Factory de la aplicación FastAPI."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Supervisión y directorio de las DEMUNA",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url=f"{settings.API_V1_PREFIX}/docs",
        redoc_url=f"{settings.API_V1_PREFIX}/redoc",
        lifespan=lifespan,
    )

    # CORS (la cookie de sesión requiere credenciales)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    setup_exception_handlers(app)

    # Rutas
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Health check sin dependencias."""
        return {"status": "healthy", "version": settings.VERSION}

    return app


app = create_application()
