"""
Configuración de la sesión asíncrona de base de datos.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from demuna.core.config import settings

# Cada sesión abre su propia conexión: las búsquedas de catálogos se
# ejecutan en paralelo con una sesión por consulta.
engine = create_async_engine(
    str(settings.DATABASE_URL),
    echo=False,
    poolclass=NullPool,
)

async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)
