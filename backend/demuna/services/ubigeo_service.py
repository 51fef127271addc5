"""
Service de Ubigeos para el selector en cascada (departamento, provincia, distrito).

Cada consulta tiene un tiempo máximo y una consulta nueva sobre el mismo
recurso y cliente cancela la anterior que siga en curso.
"""

import asyncio
from collections.abc import Awaitable, Callable, Hashable
from typing import Any, TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from demuna.core.config import settings
from demuna.core.exceptions import (
    BackendError,
    LookupTimeoutError,
    ResourceNotFoundError,
    SupersededRequestError,
)
from demuna.models.ubigeo import NivelUbigeo, Ubigeo
from demuna.repositories.ubigeo_repository import UbigeoRepository
from demuna.schemas.ubigeo import RegionInfo, UbigeoResponse
from demuna.services.filters import (
    DEPARTAMENTO_DIGITS,
    PROVINCIA_DIGITS,
    UBIGEO_LENGTH,
    parent_codes,
    significant_length,
    validate_ubigeo,
)
from demuna.services.lookup_cache import LookupCache

logger = structlog.get_logger()

T = TypeVar("T")


class LatestRequestGate:
    """
    Deja en curso solo la consulta más reciente por clave.

    Al llegar una consulta con la misma clave se cancela la anterior; quien
    esperaba la cancelada recibe SupersededRequestError.
    """

    def __init__(self, timeout: float):
        self.timeout = timeout
        self._tasks: dict[Hashable, asyncio.Task] = {}

    def in_flight(self, key: Hashable) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    async def run(
        self,
        key: Hashable,
        resource: str,
        factory: Callable[[], Awaitable[T]],
    ) -> T:
        previous = self._tasks.get(key)
        if previous is not None and not previous.done():
            previous.cancel()

        task = asyncio.ensure_future(asyncio.wait_for(factory(), self.timeout))
        self._tasks[key] = task
        try:
            return await task
        except asyncio.TimeoutError as exc:
            logger.warning("Consulta de ubigeos sin respuesta", recurso=resource, timeout=self.timeout)
            raise LookupTimeoutError(resource, self.timeout) from exc
        except asyncio.CancelledError:
            if self._tasks.get(key) is not task:
                raise SupersededRequestError(resource) from None
            raise
        finally:
            if self._tasks.get(key) is task:
                del self._tasks[key]


def _response(ubigeo: Ubigeo) -> UbigeoResponse:
    return UbigeoResponse.model_validate(ubigeo)


class UbigeosService:
    """Catálogo de ubigeos con caché, tiempo máximo y cancelación."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        cache: LookupCache | None = None,
        timeout: float | None = None,
    ):
        self._session_factory = session_factory
        self.cache = cache if cache is not None else LookupCache()
        self.gate = LatestRequestGate(timeout or settings.UBIGEO_TIMEOUT_SECONDS)

    def _remember(self, ubigeos: list[Ubigeo]) -> list[UbigeoResponse]:
        """Guarda cada ubigeo por código y su nombre para la desnormalización."""
        respuestas = [_response(u) for u in ubigeos]
        self.cache.merge("ubigeo", {u.codigo_ubigeo: u for u in respuestas})
        self.cache.merge("ubigeos", {u.codigo_ubigeo: u.txt_nombre for u in respuestas})
        return respuestas

    async def _listar(
        self,
        recurso: str,
        clave: Hashable,
        cliente: str | None,
        consulta: Callable[[UbigeoRepository], Awaitable[list[Ubigeo]]],
    ) -> list[UbigeoResponse]:
        cached = self.cache.get("ubigeos_listas", clave)
        if cached is not None:
            return cached

        async def cargar() -> list[UbigeoResponse]:
            try:
                async with self._session_factory() as session:
                    ubigeos = await consulta(UbigeoRepository(session))
            except SQLAlchemyError as exc:
                logger.error("Error al cargar ubigeos", recurso=recurso, error=str(exc))
                raise BackendError(f"Error al cargar {recurso}: {exc}", operation=recurso) from exc
            return self._remember(ubigeos)

        respuestas = await self.gate.run((cliente, recurso), recurso, cargar)
        self.cache.merge("ubigeos_listas", {clave: respuestas})
        return respuestas

    async def get_departamentos(self, cliente: str | None = None) -> list[UbigeoResponse]:
        """Departamentos ordenados por nombre."""
        return await self._listar(
            "departamentos",
            "departamentos",
            cliente,
            lambda repo: repo.por_nivel(NivelUbigeo.DEPARTAMENTO),
        )

    async def get_provincias(self, departamento: str, cliente: str | None = None) -> list[UbigeoResponse]:
        """Provincias del departamento; acepta el código de 2 o 6 dígitos."""
        if not departamento or not departamento.strip():
            return []
        codigo = validate_ubigeo(departamento)[:DEPARTAMENTO_DIGITS].ljust(UBIGEO_LENGTH, "0")
        return await self._listar(
            "provincias",
            ("provincias", codigo),
            cliente,
            lambda repo: repo.por_nivel(NivelUbigeo.PROVINCIA, codigo),
        )

    async def get_distritos(self, provincia: str, cliente: str | None = None) -> list[UbigeoResponse]:
        """Distritos de la provincia; acepta el código de 4 o 6 dígitos."""
        if not provincia or not provincia.strip():
            return []
        codigo = validate_ubigeo(provincia)[:PROVINCIA_DIGITS].ljust(UBIGEO_LENGTH, "0")
        return await self._listar(
            "distritos",
            ("distritos", codigo),
            cliente,
            lambda repo: repo.por_nivel(NivelUbigeo.DISTRITO, codigo),
        )

    async def _por_codigo(self, codigos: list[str]) -> dict[str, UbigeoResponse]:
        """Ubigeos por código con una sola consulta para los que faltan."""
        faltantes = self.cache.missing("ubigeo", codigos)
        if faltantes:
            try:
                async with self._session_factory() as session:
                    ubigeos = await UbigeoRepository(session).find_in(Ubigeo.codigo_ubigeo, faltantes)
            except SQLAlchemyError as exc:
                raise BackendError(f"Error al obtener ubigeos: {exc}", operation="ubigeo") from exc
            encontrados = {u.codigo_ubigeo for u in self._remember(ubigeos)}
            self.cache.remember_misses("ubigeo", [c for c in faltantes if c not in encontrados])
        return self.cache.lookup("ubigeo", codigos)

    async def get_ubigeo(self, codigo: str) -> UbigeoResponse:
        codigo = validate_ubigeo(codigo)
        encontrados = await self._por_codigo([codigo])
        if codigo not in encontrados:
            raise ResourceNotFoundError("Ubigeo", codigo)
        return encontrados[codigo]

    async def get_region_info(self, codigo: str | None) -> RegionInfo:
        """
        Departamento, provincia y distrito de un código.

        Los tres se resuelven en una sola consulta; los niveles inexistentes
        quedan en None.
        """
        if not codigo or not codigo.strip():
            return RegionInfo()

        codigo = validate_ubigeo(codigo).ljust(UBIGEO_LENGTH, "0")
        departamento, provincia, distrito = parent_codes(codigo)
        nivel = significant_length(codigo)
        if nivel <= DEPARTAMENTO_DIGITS:
            provincia = distrito = None
        elif nivel <= PROVINCIA_DIGITS:
            distrito = None

        codigos = [c for c in (departamento, provincia, distrito) if c]
        encontrados: dict[str, Any] = await self._por_codigo(codigos)
        return RegionInfo(
            departamento=encontrados.get(departamento),
            provincia=encontrados.get(provincia) if provincia else None,
            distrito=encontrados.get(distrito) if distrito else None,
        )

