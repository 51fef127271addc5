"""
Servicio base de búsqueda paginada con desnormalización.

Flujo de search():
1. Normaliza página y tamaño.
2. Arma los filtros una sola vez (build_filters).
3. Cuenta; si el total es 0 no consulta datos.
4. Consulta la página con los mismos filtros y un orden estable.
5. Reemplaza los códigos por nombres con consultas por lote y caché.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Hashable, Iterable, Sequence
from typing import Any, Generic, TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from demuna.core.config import settings
from demuna.core.exceptions import BackendError
from demuna.core.result import Result
from demuna.db.base import Base
from demuna.models.defensoria import Defensoria, DefensoriaCaracteristica
from demuna.models.sincronizacion import SincronizacionEstado
from demuna.models.supervision import SeguimientoCierreTipo, SupervisionModalidad, Supervisor
from demuna.models.ubigeo import Ubigeo
from demuna.repositories.base import BaseRepository
from demuna.schemas.base import SearchParams, SearchResult
from demuna.services.filters import FilterSet, parent_codes
from demuna.services.lookup_cache import LookupCache

logger = structlog.get_logger()

P = TypeVar("P", bound=SearchParams)
R = TypeVar("R")

# Textos cuando un código no se puede resolver
DESCONOCIDO = "Desconocido"
DESCONOCIDA = "Desconocida"
NO_ASIGNADO = "No asignado"
NO_ESPECIFICADA = "No especificada"

# Catálogos resolubles: espacio de caché -> (modelo, columna clave, columnas valor)
LOOKUPS: dict[str, tuple[type[Base], Any, tuple[Any, ...]]] = {
    "ubigeos": (Ubigeo, Ubigeo.codigo_ubigeo, (Ubigeo.txt_nombre,)),
    "caracteristicas": (
        DefensoriaCaracteristica,
        DefensoriaCaracteristica.clave_caracteristica,
        (DefensoriaCaracteristica.valor_caracteristica,),
    ),
    "supervisores": (Supervisor, Supervisor.codigo_supervisor, (Supervisor.nombre_supervisor,)),
    "modalidades": (
        SupervisionModalidad,
        SupervisionModalidad.nid_modalidad,
        (SupervisionModalidad.nombre_modalidad,),
    ),
    "cierre_tipos": (
        SeguimientoCierreTipo,
        SeguimientoCierreTipo.cod_tipo_cierre,
        (SeguimientoCierreTipo.txt_nombre,),
    ),
    "estados_sincronizacion": (
        SincronizacionEstado,
        SincronizacionEstado.nid_estado,
        (SincronizacionEstado.nombre_estado,),
    ),
    "defensorias": (Defensoria, Defensoria.codigo_dna, (Defensoria.txt_nombre, Defensoria.nid_ubigeo)),
}


def pagination_range(page: int, page_size: int) -> tuple[int, int]:
    """Offset y límite de la página (la página 1 empieza en 0)."""
    offset = max(0, (page - 1) * page_size)
    return offset, page_size


def enlace_sisdna(*partes: Any) -> str:
    """Enlace a la ficha del registro en el sistema SISDNA."""
    ruta = "/".join(str(parte) for parte in partes)
    return f"{settings.SISDNA_BASE_URL.rstrip('/')}/{ruta}"


def region_labels(nid_ubigeo: str | None, nombres: dict[Hashable, str]) -> tuple[str, str, str]:
    """Departamento, provincia y distrito de un código ya resuelto."""
    if not nid_ubigeo:
        return DESCONOCIDO, DESCONOCIDO, DESCONOCIDO
    departamento, provincia, distrito = parent_codes(nid_ubigeo)
    return (
        nombres.get(departamento) or DESCONOCIDO,
        nombres.get(provincia) or DESCONOCIDO,
        nombres.get(distrito) or DESCONOCIDO,
    )


class BaseSearchService(ABC, Generic[P, R]):
    """
    Base de los servicios de búsqueda por entidad.

    Las subclases definen model, build_filters, order_by y denormalize;
    fetch_rows puede sobrescribirse para consultas con joins.
    """

    model: type[Base]
    resource_name: str = "registros"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        cache: LookupCache | None = None,
        default_page_size: int | None = None,
        max_page_size: int | None = None,
    ):
        self._session_factory = session_factory
        self.cache = cache if cache is not None else LookupCache()
        self.default_page_size = default_page_size or settings.DEFAULT_PAGE_SIZE
        self.max_page_size = max_page_size or settings.MAX_PAGE_SIZE

    @abstractmethod
    def build_filters(self, params: P) -> FilterSet:
        """Predicados de la búsqueda; usados por el conteo y por los datos."""

    @abstractmethod
    def order_by(self) -> Sequence[Any]:
        """Orden estable de la página."""

    @abstractmethod
    async def denormalize(self, rows: list[Any]) -> list[R]:
        """Convierte filas crudas en registros listos para mostrar."""

    def normalize_pagination(self, page: int | None, page_size: int | None) -> tuple[int, int]:
        """Página mínima 1; tamaño entre 1 y el máximo (por defecto si es inválido)."""
        page = page if page and page > 0 else 1
        if not page_size or page_size < 1:
            page_size = self.default_page_size
        return page, min(page_size, self.max_page_size)

    async def count(self, filters: FilterSet) -> int:
        """Total de filas que cumplen los filtros."""
        try:
            async with self._session_factory() as session:
                return await BaseRepository(self.model, session).count(filters)
        except SQLAlchemyError as exc:
            logger.error("Error al contar registros", recurso=self.resource_name, error=str(exc))
            raise BackendError(
                f"Error al obtener conteo de registros: {exc}",
                operation="count",
            ) from exc

    async def fetch_rows(
        self,
        session: AsyncSession,
        filters: FilterSet,
        skip: int,
        limit: int,
    ) -> list[Any]:
        return await BaseRepository(self.model, session).find(
            filters, order_by=self.order_by(), skip=skip, limit=limit
        )

    async def search(self, params: P) -> SearchResult[R]:
        """Búsqueda paginada: conteo, página y desnormalización."""
        page, page_size = self.normalize_pagination(params.page, params.page_size)
        filters = self.build_filters(params)

        total = await self.count(filters)
        if total == 0:
            return SearchResult(records=[], total_records=0, page=page, page_size=page_size)

        skip, limit = pagination_range(page, page_size)
        if skip >= total:
            return SearchResult(records=[], total_records=total, page=page, page_size=page_size)

        try:
            async with self._session_factory() as session:
                rows = await self.fetch_rows(session, filters, skip, limit)
        except SQLAlchemyError as exc:
            logger.error("Error al buscar registros", recurso=self.resource_name, error=str(exc))
            raise BackendError(
                f"Error al buscar {self.resource_name}: {exc}",
                operation="search",
            ) from exc

        records = await self.denormalize(rows) if rows else []

        logger.debug(
            "Búsqueda completada",
            recurso=self.resource_name,
            total=total,
            page=page,
            registros=len(records),
        )
        return SearchResult(
            records=records,
            total_records=total,
            page=page,
            page_size=page_size,
        )

    # === Resolución de catálogos ===

    async def resolve(self, namespace: str, keys: Iterable[Hashable]) -> Result[dict[Hashable, Any]]:
        """
        Resuelve códigos de un catálogo con a lo sumo una consulta.

        Solo se consultan los códigos que faltan en la caché; los que no
        existen quedan registrados como ausentes.
        """
        keys = [key for key in dict.fromkeys(keys) if key is not None and key != ""]
        faltantes = self.cache.missing(namespace, keys)

        if faltantes:
            model, key_column, value_columns = LOOKUPS[namespace]
            try:
                async with self._session_factory() as session:
                    encontrados = await BaseRepository(model, session).lookup(
                        key_column, value_columns, faltantes
                    )
            except SQLAlchemyError as exc:
                logger.warning(
                    "Catálogo no disponible, se usarán textos por defecto",
                    catalogo=namespace,
                    codigos=len(faltantes),
                    error=str(exc),
                )
                return Result.failure(
                    BackendError(f"Error al obtener {namespace}: {exc}", operation=namespace)
                )
            self.cache.merge(namespace, encontrados)
            self.cache.remember_misses(
                namespace, [key for key in faltantes if key not in encontrados]
            )

        return Result.success(self.cache.lookup(namespace, keys))

    async def resolve_ubigeos(self, codigos: Iterable[str | None]) -> Result[dict[Hashable, Any]]:
        """Resuelve distritos junto con su departamento y provincia."""
        keys: list[str] = []
        for codigo in codigos:
            if codigo:
                keys.extend(parent_codes(codigo))
        return await self.resolve("ubigeos", keys)

    async def resolve_all(self, **lotes: tuple[str, Iterable[Hashable]]) -> dict[str, dict[Hashable, Any]]:
        """
        Resuelve varios catálogos en paralelo.

        Cada argumento es nombre=(espacio, códigos). Un catálogo que falla se
        degrada a un mapa vacío.
        """
        nombres = list(lotes)
        results = await asyncio.gather(
            *(
                self.resolve_ubigeos(codigos) if namespace == "ubigeos"
                else self.resolve(namespace, codigos)
                for namespace, codigos in lotes.values()
            )
        )
        return {nombre: result.unwrap_or({}) for nombre, result in zip(nombres, results)}
