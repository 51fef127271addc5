"""
Service de reportes estadísticos de defensorías.

Los conteos usan el mismo constructor de filtros que el directorio, así que
el total del reporte coincide con el total de la búsqueda.
"""

import unicodedata

import structlog
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from demuna.core.exceptions import BackendError
from demuna.models.defensoria import Defensoria, EstadoAcreditacion
from demuna.repositories.defensoria_repository import DefensoriaRepository
from demuna.schemas.defensoria import DefensoriasSearchParams
from demuna.schemas.reportes import DepartamentoStat, DnaStats, EstadoStat, MapPoint, TipoStat
from demuna.services.defensoria_service import DefensoriasService
from demuna.services.filters import DEPARTAMENTO_DIGITS, UBIGEO_LENGTH
from demuna.services.lookup_cache import LookupCache

logger = structlog.get_logger()

COLORES_ESTADO = {
    EstadoAcreditacion.ACREDITADA: "#10b981",
    EstadoAcreditacion.NO_ACREDITADA: "#ef4444",
    EstadoAcreditacion.NO_OPERATIVA: "#3b82f6",
}
COLOR_POR_DEFECTO = "#9ca3af"

TIPO_NO_ESPECIFICADO = "No especificado"

# Orden de presentación de los estados
ORDEN_ESTADOS = (
    EstadoAcreditacion.ACREDITADA,
    EstadoAcreditacion.NO_ACREDITADA,
    EstadoAcreditacion.NO_OPERATIVA,
)


def porcentaje(cantidad: int, total: int) -> float:
    return round(cantidad / (total or 1) * 100, 2)


def slug_departamento(nombre: str) -> str:
    """
    Identificador del departamento en el mapa.

    >>> slug_departamento("Madre de Dios")
    'madre-de-dios'
    >>> slug_departamento("Junín")
    'junin'
    """
    sin_tildes = unicodedata.normalize("NFKD", nombre).encode("ascii", "ignore").decode("ascii")
    return "-".join(sin_tildes.lower().split())


class DnaReportesService:
    """Estadísticas de defensorías por estado, departamento y tipo."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        cache: LookupCache | None = None,
    ):
        self._session_factory = session_factory
        self.defensorias = DefensoriasService(session_factory, cache)

    async def get_stats(
        self,
        ubigeo: str | None = None,
        estado_acreditacion: str | None = None,
    ) -> DnaStats:
        filters = list(
            self.defensorias.build_filters(
                DefensoriasSearchParams(ubigeo=ubigeo, estado_acreditacion=estado_acreditacion)
            )
        )
        departamento = func.substr(Defensoria.nid_ubigeo, 1, DEPARTAMENTO_DIGITS)

        try:
            async with self._session_factory() as session:
                repo = DefensoriaRepository(session)
                total = await repo.count(filters)
                por_estado = await repo.count_by(Defensoria.nid_estado, filters)
                por_departamento = await repo.count_by(
                    departamento, [*filters, Defensoria.nid_ubigeo.is_not(None)]
                )
                por_tipo = await repo.count_by(Defensoria.txt_tipo, filters)
        except SQLAlchemyError as exc:
            logger.error("Error al obtener estadísticas", error=str(exc))
            raise BackendError(f"Error al obtener estadísticas: {exc}", operation="stats") from exc

        if total == 0:
            return DnaStats()

        nombres = await self.defensorias.resolve_all(
            departamentos=(
                "ubigeos",
                [codigo.ljust(UBIGEO_LENGTH, "0") for codigo in por_departamento if codigo],
            ),
            tipos=("caracteristicas", [tipo for tipo in por_tipo if tipo]),
        )
        departamentos = nombres["departamentos"]

        estados = [
            EstadoStat(
                estado=estado.etiqueta,
                cantidad=por_estado.get(estado.value, 0),
                porcentaje=porcentaje(por_estado.get(estado.value, 0), total),
                color=COLORES_ESTADO.get(estado, COLOR_POR_DEFECTO),
            )
            for estado in ORDEN_ESTADOS
        ]

        return DnaStats(
            total_defensorias=total,
            acreditadas=por_estado.get(EstadoAcreditacion.ACREDITADA.value, 0),
            no_acreditadas=por_estado.get(EstadoAcreditacion.NO_ACREDITADA.value, 0),
            no_operativas=por_estado.get(EstadoAcreditacion.NO_OPERATIVA.value, 0),
            por_departamento=sorted(
                (
                    DepartamentoStat(
                        departamento=departamentos.get(codigo.ljust(UBIGEO_LENGTH, "0"))
                        or f"Departamento {codigo}",
                        cantidad=cantidad,
                        porcentaje=porcentaje(cantidad, total),
                    )
                    for codigo, cantidad in por_departamento.items()
                    if codigo
                ),
                key=lambda stat: stat.cantidad,
                reverse=True,
            ),
            por_estado=estados,
            por_tipo=sorted(
                (
                    TipoStat(
                        tipo=(
                            nombres["tipos"].get(tipo) or f"Tipo {tipo}"
                            if tipo else TIPO_NO_ESPECIFICADO
                        ),
                        cantidad=cantidad,
                        porcentaje=porcentaje(cantidad, total),
                    )
                    for tipo, cantidad in por_tipo.items()
                ),
                key=lambda stat: stat.cantidad,
                reverse=True,
            ),
        )

    async def get_map_data(
        self,
        ubigeo: str | None = None,
        estado_acreditacion: str | None = None,
    ) -> list[MapPoint]:
        """Cantidad de defensorías por departamento para el mapa."""
        stats = await self.get_stats(ubigeo, estado_acreditacion)
        return [
            MapPoint(
                id=slug_departamento(dep.departamento),
                value=dep.cantidad,
                tooltip=f"{dep.departamento}: {dep.cantidad} defensorías ({dep.porcentaje:.1f}%)",
            )
            for dep in stats.por_departamento
        ]
