"""
Dependencias inyectables de FastAPI.

Define las dependencias reutilizables de sesión de base de datos,
autenticación por cookie y servicios compartidos.
"""

from datetime import datetime, timezone
from functools import lru_cache
from typing import Annotated, AsyncGenerator

from fastapi import Cookie, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from demuna.core.config import settings
from demuna.core.exceptions import InvalidSessionError
from demuna.core.security import decode_session_token, refresh_session_token
from demuna.db.session import async_session_maker
from demuna.schemas.auth import SessionUser
from demuna.services.auth_service import AuthService
from demuna.services.defensoria_service import DefensoriasService
from demuna.services.lookup_cache import LookupCache
from demuna.services.reportes_service import DnaReportesService
from demuna.services.sincronizacion_service import (
    SincronizacionService,
    SincronizacionSupervisionesService,
)
from demuna.services.supervision_service import SupervisionesService
from demuna.services.ubigeo_service import UbigeosService


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Fábrica de sesiones; cada consulta en paralelo abre la suya."""
    return async_session_maker


async def get_db(
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency que entrega una sesión de base de datos.

    Uso:
        @router.get("/health/ready")
        async def ready(db: DBSession):
            ...
    """
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


@lru_cache
def get_lookup_cache() -> LookupCache:
    """Caché de catálogos compartida por toda la aplicación."""
    return LookupCache(ttl=settings.LOOKUP_CACHE_TTL_SECONDS)


# === Sesión ===

def set_session_cookie(response: Response, token: str, max_age: int | None = None) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=max_age if max_age is not None else settings.SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.ENVIRONMENT == "production",
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")


async def get_current_user(
    response: Response,
    auth_session: Annotated[str | None, Cookie(alias=settings.SESSION_COOKIE_NAME)] = None,
) -> SessionUser:
    """
    Dependency que retorna el usuario de la cookie de sesión.

    Valida firma, expiración e inactividad y renueva la cookie con la
    actividad actual.

    Raises:
        InvalidSessionError: Sin cookie o cookie alterada
        SessionExpiredError: Sesión vencida o inactiva
    """
    if not auth_session:
        raise InvalidSessionError("Sesión requerida")

    payload = decode_session_token(auth_session)

    restante = int(payload["exp"] - datetime.now(timezone.utc).timestamp())
    set_session_cookie(response, refresh_session_token(payload), max_age=max(restante, 0))

    return SessionUser(email=payload["sub"], name=payload.get("name"))


# === Servicios ===

SessionFactory = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]
SharedCache = Annotated[LookupCache, Depends(get_lookup_cache)]


def get_auth_service() -> AuthService:
    return AuthService()


def get_defensorias_service(session_factory: SessionFactory, cache: SharedCache) -> DefensoriasService:
    return DefensoriasService(session_factory, cache)


def get_supervisiones_service(session_factory: SessionFactory, cache: SharedCache) -> SupervisionesService:
    return SupervisionesService(session_factory, cache)


def get_sincronizacion_service(session_factory: SessionFactory, cache: SharedCache) -> SincronizacionService:
    return SincronizacionService(session_factory, cache)


def get_sincronizacion_supervisiones_service(
    session_factory: SessionFactory,
    cache: SharedCache,
) -> SincronizacionSupervisionesService:
    return SincronizacionSupervisionesService(session_factory, cache)


def get_reportes_service(session_factory: SessionFactory, cache: SharedCache) -> DnaReportesService:
    return DnaReportesService(session_factory, cache)


@lru_cache
def get_ubigeos_service() -> UbigeosService:
    """
    Instancia única: la cancelación de consultas reemplazadas necesita ver
    las consultas en curso de todas las peticiones.
    """
    return UbigeosService(get_session_factory(), get_lookup_cache())


# Type aliases para facilitar el uso en las rutas
DBSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[SessionUser, Depends(get_current_user)]
Auth = Annotated[AuthService, Depends(get_auth_service)]
Defensorias = Annotated[DefensoriasService, Depends(get_defensorias_service)]
Supervisiones = Annotated[SupervisionesService, Depends(get_supervisiones_service)]
Sincronizacion = Annotated[SincronizacionService, Depends(get_sincronizacion_service)]
SincronizacionSupervisiones = Annotated[
    SincronizacionSupervisionesService, Depends(get_sincronizacion_supervisiones_service)
]
Reportes = Annotated[DnaReportesService, Depends(get_reportes_service)]
Ubigeos = Annotated[UbigeosService, Depends(get_ubigeos_service)]
