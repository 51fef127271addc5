"""
Health check endpoints.
"""

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from demuna.core.config import settings
from demuna.core.dependencies import DBSession

logger = structlog.get_logger()

router = APIRouter()


@router.get("")
async def health_check() -> dict:
    """Health check básico."""
    return {
        "status": "healthy",
        "version": settings.VERSION,
    }


@router.get("/ready")
async def readiness_check(db: DBSession):
    """
    Readiness check.

    Verifica que la base de datos responda antes de recibir tráfico.
    """
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Base de datos no disponible", error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "checks": {"database": "error"}},
        )

    return {
        "status": "ready",
        "checks": {
            "database": "ok",
        },
    }
