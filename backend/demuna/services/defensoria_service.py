"""
Service de Defensorías.

Búsqueda paginada del directorio, detalle y responsables vigentes.
"""

from collections.abc import Iterable
from datetime import date

import structlog
from sqlalchemy.exc import SQLAlchemyError

from demuna.core.exceptions import BackendError, ResourceNotFoundError
from demuna.models.defensoria import Defensoria, DefensoriaPersona, EstadoAcreditacion
from demuna.repositories.defensoria_repository import DefensoriaRepository
from demuna.schemas.defensoria import (
    DefensoriaDetail,
    DefensoriaRecord,
    DefensoriasSearchParams,
    EstadoAcreditacionOption,
    ResponsableCreate,
    ResponsableInfo,
)
from demuna.services.base_service import BaseSearchService, enlace_sisdna, region_labels
from demuna.services.filters import (
    FilterSet,
    codigo_predicate,
    equals_predicate,
    ubigeo_predicate,
)

logger = structlog.get_logger()


def seleccionar_responsable_reciente(
    personas: Iterable[DefensoriaPersona],
) -> DefensoriaPersona | None:
    """
    Persona con la fecha de designación más reciente.

    Una fecha nula cuenta como la más antigua posible. Sin personas retorna None.
    """
    return max(
        personas,
        key=lambda persona: persona.fec_designacion or date.min,
        default=None,
    )


def _responsable_info(persona: DefensoriaPersona) -> ResponsableInfo:
    return ResponsableInfo(
        txt_nombres=persona.txt_nombres or "",
        txt_apellidos=persona.txt_apellidos or "",
        txt_correo=persona.txt_correo or "",
        txt_telefono=persona.txt_telefono or "",
        fec_designacion=persona.fec_designacion,
    )


class DefensoriasService(BaseSearchService[DefensoriasSearchParams, DefensoriaRecord]):
    """
    Service del directorio de defensorías.

    Usado tanto por la vista pública como por la del personal.
    """

    model = Defensoria
    resource_name = "defensorías"

    def build_filters(self, params: DefensoriasSearchParams) -> FilterSet:
        return (
            FilterSet()
            .add(ubigeo_predicate(Defensoria.nid_ubigeo, params.ubigeo))
            .add(codigo_predicate(Defensoria.codigo_dna, params.codigo_dna))
            .add(equals_predicate(Defensoria.nid_estado, params.estado_acreditacion))
        )

    def order_by(self):
        return [Defensoria.codigo_dna]

    async def denormalize(self, rows: list[Defensoria]) -> list[DefensoriaRecord]:
        """Reemplaza tipo, estado y ubigeo por sus nombres."""
        nombres = await self.resolve_all(
            caracteristicas=(
                "caracteristicas",
                [d.txt_tipo for d in rows] + [d.nid_estado for d in rows],
            ),
            ubigeos=("ubigeos", [d.nid_ubigeo for d in rows]),
        )
        caracteristicas = nombres["caracteristicas"]
        ubigeos = nombres["ubigeos"]

        records = []
        for defensoria in rows:
            departamento, provincia, distrito = region_labels(defensoria.nid_ubigeo, ubigeos)
            records.append(
                DefensoriaRecord(
                    codigo_dna=defensoria.codigo_dna,
                    txt_nombre=defensoria.txt_nombre,
                    tipo_demuna=caracteristicas.get(defensoria.txt_tipo, ""),
                    nid_ubigeo=defensoria.nid_ubigeo,
                    direccion=defensoria.txt_direccion or "",
                    telefono=defensoria.txt_telefono or "",
                    correo=defensoria.txt_correo or "",
                    estado_acreditacion=caracteristicas.get(defensoria.nid_estado, ""),
                    estado_acreditacion_codigo=defensoria.nid_estado,
                    departamento=departamento,
                    provincia=provincia,
                    distrito=distrito,
                    enlace_sisdna=enlace_sisdna("defensorias", defensoria.codigo_dna),
                )
            )
        return records

    async def get_estados_acreditacion(self) -> list[EstadoAcreditacionOption]:
        """
        Opciones del filtro de acreditación (a, b, c).

        Si el catálogo no responde se usan las etiquetas conocidas.
        """
        claves = [estado.value for estado in EstadoAcreditacion]
        nombres = (await self.resolve("caracteristicas", claves)).unwrap_or({})
        return [
            EstadoAcreditacionOption(
                clave_caracteristica=clave,
                valor_caracteristica=nombres.get(clave) or EstadoAcreditacion(clave).etiqueta,
            )
            for clave in claves
        ]

    async def obtener(self, codigo_dna: str) -> DefensoriaDetail:
        """Detalle de la defensoría con su responsable vigente."""
        try:
            async with self._session_factory() as session:
                defensoria = await DefensoriaRepository(session).get_by_id(codigo_dna)
        except SQLAlchemyError as exc:
            raise BackendError(f"Error al obtener la defensoría: {exc}", operation="get") from exc

        if defensoria is None:
            raise ResourceNotFoundError("Defensoría", codigo_dna)

        [record] = await self.denormalize([defensoria])
        responsables = await self.cargar_responsables([codigo_dna])
        return DefensoriaDetail(
            **record.model_dump(),
            responsable=responsables.get(codigo_dna),
        )

    async def cargar_responsables(
        self,
        codigos_dna: list[str],
    ) -> dict[str, ResponsableInfo | None]:
        """
        Responsable vigente de cada defensoría.

        Consulta solo los códigos sin caché; las defensorías sin responsable
        quedan en caché como ausentes.
        """
        codigos_dna = list(dict.fromkeys(codigos_dna))
        faltantes = self.cache.missing("responsables", codigos_dna)

        if faltantes:
            try:
                async with self._session_factory() as session:
                    personas = await DefensoriaRepository(session).responsables_de(faltantes)
            except SQLAlchemyError as exc:
                raise BackendError(f"Error al cargar responsables: {exc}", operation="responsables") from exc

            por_defensoria: dict[str, list[DefensoriaPersona]] = {}
            for persona in personas:
                por_defensoria.setdefault(persona.codigo_dna, []).append(persona)

            encontrados = {
                codigo: _responsable_info(seleccionar_responsable_reciente(lista))
                for codigo, lista in por_defensoria.items()
            }
            self.cache.merge("responsables", encontrados)
            self.cache.remember_misses(
                "responsables", [c for c in faltantes if c not in encontrados]
            )

        return {codigo: self.cache.get("responsables", codigo) for codigo in codigos_dna}

    async def registrar_responsable(
        self,
        codigo_dna: str,
        datos: ResponsableCreate,
    ) -> ResponsableInfo:
        """Registra un responsable ingresado por el personal."""
        try:
            async with self._session_factory() as session:
                repo = DefensoriaRepository(session)
                if await repo.get_by_id(codigo_dna) is None:
                    raise ResourceNotFoundError("Defensoría", codigo_dna)
                persona = await repo.add_responsable(codigo_dna, **datos.model_dump())
        except SQLAlchemyError as exc:
            raise BackendError(f"Error al registrar responsable: {exc}", operation="create") from exc

        self.cache.invalidate("responsables", codigo_dna)
        logger.info("Responsable registrado", codigo_dna=codigo_dna, persona=persona.nid_persona)
        return _responsable_info(persona)
