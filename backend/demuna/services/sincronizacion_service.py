"""
Services de sincronización con SISDNA.

Marcan defensorías y supervisiones cuyo registro difiere del sistema de
registro externo, con la lista de campos desactualizados.
"""

import structlog
from sqlalchemy.exc import SQLAlchemyError

from demuna.core.exceptions import BackendError
from demuna.core.result import Result
from demuna.models.defensoria import Defensoria
from demuna.models.sincronizacion import EstadoSincronizacion, SincronizacionEstado
from demuna.models.supervision import Supervision
from demuna.repositories.base import BaseRepository
from demuna.schemas.sincronizacion import (
    DefensoriaSincronizacion,
    EstadoSincronizacionOption,
    SincronizacionSearchParams,
    SincronizacionSupervisionesSearchParams,
    SupervisionSincronizacion,
)
from demuna.services.base_service import (
    DESCONOCIDA,
    NO_ASIGNADO,
    NO_ESPECIFICADA,
    BaseSearchService,
    enlace_sisdna,
    region_labels,
)
from demuna.services.filters import (
    FilterSet,
    codigo_predicate,
    equals_predicate,
    ubigeo_predicate,
)
from demuna.services.supervision_service import SupervisionesBusqueda

logger = structlog.get_logger()

# Estado mostrado cuando el registro no tiene un estado reconocible
ESTADO_POR_DEFECTO = EstadoSincronizacion.NO_ACTUALIZADA


def parse_campos_desactualizados(texto: str | None) -> list[str]:
    """
    Lista de campos desactualizados a partir del texto separado por comas.

    >>> parse_campos_desactualizados("TXT_DIRECCION, TXT_TELEFONO")
    ['TXT_DIRECCION', 'TXT_TELEFONO']
    """
    if not texto:
        return []
    campos = (campo.strip() for campo in texto.split(","))
    return list(dict.fromkeys(campo for campo in campos if campo))


def estado_sisdna(nombre: str | None) -> tuple[str, EstadoSincronizacion | None]:
    """Nombre a mostrar y enum del estado; sin nombre se usa NO ACTUALIZADA."""
    if not nombre:
        return ESTADO_POR_DEFECTO.value, ESTADO_POR_DEFECTO
    return nombre, EstadoSincronizacion.parse(nombre)


class EstadosSincronizacionMixin:
    """Catálogo de estados compartido por ambas vistas de sincronización."""

    async def get_estados_sincronizacion(self) -> Result[list[EstadoSincronizacionOption]]:
        """Catálogo completo de estados de sincronización."""
        cached = self.cache.get("catalogos", "estados_sincronizacion")
        if cached is not None:
            return Result.success(cached)

        try:
            async with self._session_factory() as session:
                estados = await BaseRepository(SincronizacionEstado, session).find(
                    order_by=[SincronizacionEstado.nid_estado]
                )
        except SQLAlchemyError as exc:
            logger.warning("Error al cargar estados de sincronización", error=str(exc))
            return Result.failure(
                BackendError(f"Error al cargar estados de sincronización: {exc}", operation="estados")
            )

        opciones = [EstadoSincronizacionOption.model_validate(e) for e in estados]
        self.cache.merge("catalogos", {"estados_sincronizacion": opciones})
        self.cache.merge("estados_sincronizacion", {e.nid_estado: e.nombre_estado for e in estados})
        return Result.success(opciones)


class SincronizacionService(EstadosSincronizacionMixin, BaseSearchService[SincronizacionSearchParams, DefensoriaSincronizacion]):
    """Estado de sincronización de las defensorías."""

    model = Defensoria
    resource_name = "defensorías"

    def build_filters(self, params: SincronizacionSearchParams) -> FilterSet:
        return (
            FilterSet()
            .add(ubigeo_predicate(Defensoria.nid_ubigeo, params.ubigeo))
            .add(codigo_predicate(Defensoria.codigo_dna, params.codigo_dna))
            .add(equals_predicate(Defensoria.nid_estado_sisdna, params.estado_sincronizacion))
        )

    def order_by(self):
        return [Defensoria.codigo_dna]

    async def denormalize(self, rows: list[Defensoria]) -> list[DefensoriaSincronizacion]:
        nombres = await self.resolve_all(
            estados=("estados_sincronizacion", [d.nid_estado_sisdna for d in rows]),
            ubigeos=("ubigeos", [d.nid_ubigeo for d in rows]),
        )

        records = []
        for defensoria in rows:
            departamento, provincia, distrito = region_labels(defensoria.nid_ubigeo, nombres["ubigeos"])
            nombre_estado, estado = estado_sisdna(nombres["estados"].get(defensoria.nid_estado_sisdna))
            records.append(
                DefensoriaSincronizacion(
                    codigo_dna=defensoria.codigo_dna,
                    txt_nombre=defensoria.txt_nombre,
                    nid_ubigeo=defensoria.nid_ubigeo,
                    direccion=defensoria.txt_direccion or "",
                    telefono=defensoria.txt_telefono or "",
                    correo=defensoria.txt_correo or "",
                    departamento=departamento,
                    provincia=provincia,
                    distrito=distrito,
                    estado_sisdna=nombre_estado,
                    estado=estado,
                    campos_desactualizados=parse_campos_desactualizados(
                        defensoria.txt_campos_desactualizados
                    ),
                    enlace_sisdna=enlace_sisdna("defensorias", defensoria.codigo_dna),
                )
            )
        return records


class SincronizacionSupervisionesService(
    EstadosSincronizacionMixin,
    SupervisionesBusqueda[SincronizacionSupervisionesSearchParams, SupervisionSincronizacion],
):
    """Estado de sincronización de las supervisiones."""

    def build_filters(self, params: SincronizacionSupervisionesSearchParams) -> FilterSet:
        return super().build_filters(params).add(
            equals_predicate(Supervision.nid_estado_sisdna, params.estado_sincronizacion)
        )

    async def denormalize(self, rows: list[Supervision]) -> list[SupervisionSincronizacion]:
        nombres = await self.resolve_contexto(
            rows,
            estados=("estados_sincronizacion", [s.nid_estado_sisdna for s in rows]),
        )

        records = []
        for supervision in rows:
            nombre_demuna, nid_ubigeo = nombres["defensorias"].get(
                supervision.codigo_dna, (DESCONOCIDA, None)
            )
            ubicacion = NO_ESPECIFICADA
            if nid_ubigeo:
                ubicacion = " / ".join(region_labels(nid_ubigeo, nombres["ubigeos"]))
            nombre_estado, estado = estado_sisdna(nombres["estados"].get(supervision.nid_estado_sisdna))
            records.append(
                SupervisionSincronizacion(
                    nid_supervision=supervision.nid_supervision,
                    codigo_dna=supervision.codigo_dna,
                    fecha=supervision.fecha,
                    supervisor=nombres["supervisores"].get(supervision.codigo_supervisor) or NO_ASIGNADO,
                    modalidad=nombres["modalidades"].get(supervision.nid_modalidad) or NO_ESPECIFICADA,
                    nombre_demuna=nombre_demuna or DESCONOCIDA,
                    ubicacion=ubicacion,
                    estado_sisdna=nombre_estado,
                    estado=estado,
                    campos_desactualizados=parse_campos_desactualizados(
                        supervision.txt_campos_desactualizados
                    ),
                    enlace_sisdna=enlace_sisdna("supervisiones", supervision.nid_supervision),
                )
            )
        return records
