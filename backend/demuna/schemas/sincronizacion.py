"""
Schemas del estado de sincronización con SISDNA.
"""

from datetime import date

from demuna.models.sincronizacion import EstadoSincronizacion
from demuna.schemas.base import BaseSchema, SearchParams


class SincronizacionSearchParams(SearchParams):
    """Filtros de la vista de sincronización de defensorías."""

    ubigeo: str | None = None
    codigo_dna: str | None = None
    estado_sincronizacion: str | None = None


class SincronizacionSupervisionesSearchParams(SearchParams):
    """Filtros de la vista de sincronización de supervisiones."""

    ubigeo: str | None = None
    codigo_dna: str | None = None
    fecha_desde: date | None = None
    fecha_hasta: date | None = None
    supervisor: int | None = None
    estado_sincronizacion: str | None = None


class DefensoriaSincronizacion(BaseSchema):
    """Defensoría anotada con su estado en SISDNA."""

    codigo_dna: str
    txt_nombre: str
    nid_ubigeo: str | None = None
    direccion: str = ""
    telefono: str = ""
    correo: str = ""
    departamento: str
    provincia: str
    distrito: str
    estado_sisdna: str
    estado: EstadoSincronizacion | None = None
    campos_desactualizados: list[str] = []
    enlace_sisdna: str


class SupervisionSincronizacion(BaseSchema):
    """Supervisión anotada con su estado en SISDNA."""

    nid_supervision: int
    codigo_dna: str
    fecha: date
    supervisor: str
    modalidad: str
    nombre_demuna: str
    ubicacion: str
    estado_sisdna: str
    estado: EstadoSincronizacion | None = None
    campos_desactualizados: list[str] = []
    enlace_sisdna: str


class EstadoSincronizacionOption(BaseSchema):
    """Opción del filtro de estado de sincronización."""

    nid_estado: str
    nombre_estado: str
