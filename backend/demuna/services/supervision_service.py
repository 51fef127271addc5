"""
Service de Supervisiones.

Búsqueda paginada de supervisiones con seguimiento, catálogos de filtros y
registro del seguimiento.
"""

from typing import Any, TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError

from demuna.core.exceptions import BackendError, BusinessRuleError, ResourceNotFoundError
from demuna.core.result import Result
from demuna.models.supervision import Supervision, SupervisionFicha, SupervisionSeguimiento
from demuna.repositories.supervision_repository import SupervisionRepository
from demuna.schemas.base import SearchParams
from demuna.schemas.supervision import (
    ModalidadOption,
    SeguimientoUpdate,
    SupervisionesSearchParams,
    SupervisionRecord,
    SupervisorOption,
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
    date_range_predicates,
    defensoria_ubigeo_predicate,
    equals_predicate,
)

logger = structlog.get_logger()

SupervisionRow = tuple[Supervision, SupervisionSeguimiento | None, SupervisionFicha | None]

P = TypeVar("P", bound=SearchParams)
R = TypeVar("R")


class SupervisionesBusqueda(BaseSearchService[P, R]):
    """
    Filtros, orden y nombres comunes a las búsquedas de supervisiones.

    Los parámetros deben tener ubigeo, codigo_dna, fecha_desde, fecha_hasta
    y supervisor.
    """

    model = Supervision
    resource_name = "supervisiones"

    def build_filters(self, params: P) -> FilterSet:
        return (
            FilterSet()
            .extend(date_range_predicates(Supervision.fecha, params.fecha_desde, params.fecha_hasta))
            .add(defensoria_ubigeo_predicate(Supervision.codigo_dna, params.ubigeo))
            .add(codigo_predicate(Supervision.codigo_dna, params.codigo_dna))
            .add(equals_predicate(Supervision.codigo_supervisor, params.supervisor))
        )

    def order_by(self):
        return [Supervision.fecha.desc(), Supervision.nid_supervision.desc()]

    async def resolve_contexto(self, supervisiones: list[Supervision], **extra: Any) -> dict[str, dict]:
        """
        Nombres de supervisor, modalidad y DEMUNA, y luego su ubicación.

        La ubicación depende del ubigeo de cada DEMUNA, por eso se resuelve
        en una segunda ronda.
        """
        nombres = await self.resolve_all(
            supervisores=("supervisores", [s.codigo_supervisor for s in supervisiones]),
            modalidades=("modalidades", [s.nid_modalidad for s in supervisiones]),
            defensorias=("defensorias", [s.codigo_dna for s in supervisiones]),
            **extra,
        )
        ubigeos = await self.resolve_ubigeos(
            ubigeo for _, ubigeo in nombres["defensorias"].values()
        )
        nombres["ubigeos"] = ubigeos.unwrap_or({})
        return nombres


class SupervisionesService(SupervisionesBusqueda[SupervisionesSearchParams, SupervisionRecord]):
    """Service de supervisiones a las DEMUNA."""

    async def fetch_rows(self, session, filters, skip, limit) -> list[SupervisionRow]:
        return await SupervisionRepository(session).find_with_seguimiento(
            filters, order_by=self.order_by(), skip=skip, limit=limit
        )

    async def denormalize(self, rows: list[SupervisionRow]) -> list[SupervisionRecord]:
        nombres = await self.resolve_contexto(
            [supervision for supervision, _, _ in rows],
            cierre_tipos=(
                "cierre_tipos",
                [seguimiento.nid_modalidad_cierre for _, seguimiento, _ in rows if seguimiento],
            ),
        )

        records = []
        for supervision, seguimiento, ficha in rows:
            nombre_demuna, nid_ubigeo = nombres["defensorias"].get(
                supervision.codigo_dna, (DESCONOCIDA, None)
            )
            departamento, provincia, distrito = region_labels(nid_ubigeo, nombres["ubigeos"])
            records.append(
                SupervisionRecord(
                    nid_supervision=supervision.nid_supervision,
                    codigo_dna=supervision.codigo_dna,
                    fecha=supervision.fecha,
                    supervisor=nombres["supervisores"].get(supervision.codigo_supervisor) or NO_ASIGNADO,
                    modalidad=nombres["modalidades"].get(supervision.nid_modalidad) or NO_ESPECIFICADA,
                    ficha=ficha.url_file if ficha else None,
                    doc_seguimiento=seguimiento.txt_informe_seguimiento if seguimiento else None,
                    subsanacion=seguimiento.flg_subsanacion if seguimiento else None,
                    doc_reiterativo=seguimiento.txt_oficio_reiterativo if seguimiento else None,
                    doc_oci=seguimiento.txt_oficio_oci if seguimiento else None,
                    fecha_cierre=seguimiento.fecha_cierre if seguimiento else None,
                    doc_cierre=seguimiento.txt_proveido_cierre if seguimiento else None,
                    tipo_cierre=(
                        nombres["cierre_tipos"].get(seguimiento.nid_modalidad_cierre)
                        if seguimiento else None
                    ),
                    nombre_demuna=nombre_demuna or DESCONOCIDA,
                    departamento=departamento,
                    provincia=provincia,
                    distrito=distrito,
                    enlace_sisdna=enlace_sisdna("supervisiones", supervision.nid_supervision),
                )
            )
        return records

    async def obtener(self, nid_supervision: int) -> SupervisionRecord:
        """Detalle de una supervisión."""
        try:
            async with self._session_factory() as session:
                rows = await SupervisionRepository(session).find_with_seguimiento(
                    [Supervision.nid_supervision == nid_supervision]
                )
        except SQLAlchemyError as exc:
            raise BackendError(f"Error al obtener la supervisión: {exc}", operation="get") from exc

        if not rows:
            raise ResourceNotFoundError("Supervisión", nid_supervision)

        [record] = await self.denormalize(rows)
        return record

    async def registrar_seguimiento(
        self,
        nid_supervision: int,
        datos: SeguimientoUpdate,
    ) -> SupervisionRecord:
        """
        Registra o actualiza el seguimiento de la supervisión.

        La fecha de cierre no puede ser anterior a la fecha de la supervisión.
        """
        cambios = datos.model_dump(exclude_unset=True)
        try:
            async with self._session_factory() as session:
                repo = SupervisionRepository(session)
                supervision = await repo.get_by_id(nid_supervision)
                if supervision is None:
                    raise ResourceNotFoundError("Supervisión", nid_supervision)

                fecha_cierre = cambios.get("fecha_cierre")
                if fecha_cierre and fecha_cierre < supervision.fecha:
                    raise BusinessRuleError(
                        "La fecha de cierre no puede ser anterior a la fecha de la supervisión",
                        rule="FECHA_CIERRE_ANTERIOR",
                    )

                await repo.save_seguimiento(nid_supervision, **cambios)
        except SQLAlchemyError as exc:
            raise BackendError(f"Error al registrar el seguimiento: {exc}", operation="update") from exc

        logger.info("Seguimiento registrado", nid_supervision=nid_supervision, campos=list(cambios))
        return await self.obtener(nid_supervision)

    # === Catálogos para filtros ===

    async def get_supervisores(self) -> Result[list[SupervisorOption]]:
        """Supervisores activos ordenados por nombre."""
        cached = self.cache.get("catalogos", "supervisores")
        if cached is not None:
            return Result.success(cached)

        try:
            async with self._session_factory() as session:
                supervisores = await SupervisionRepository(session).supervisores_activos()
        except SQLAlchemyError as exc:
            logger.warning("Error al cargar supervisores", error=str(exc))
            return Result.failure(BackendError(f"Error al cargar supervisores: {exc}", operation="supervisores"))

        opciones = [SupervisorOption.model_validate(s) for s in supervisores]
        self.cache.merge("catalogos", {"supervisores": opciones})
        return Result.success(opciones)

    async def get_modalidades(self) -> Result[list[ModalidadOption]]:
        """Modalidades de supervisión ordenadas por nombre."""
        cached = self.cache.get("catalogos", "modalidades")
        if cached is not None:
            return Result.success(cached)

        try:
            async with self._session_factory() as session:
                modalidades = await SupervisionRepository(session).modalidades()
        except SQLAlchemyError as exc:
            logger.warning("Error al cargar modalidades", error=str(exc))
            return Result.failure(BackendError(f"Error al cargar modalidades: {exc}", operation="modalidades"))

        opciones = [ModalidadOption.model_validate(m) for m in modalidades]
        self.cache.merge("catalogos", {"modalidades": opciones})
        return Result.success(opciones)
