"""
Schemas de Supervisiones y seguimientos.
"""

from datetime import date

from pydantic import Field

from demuna.schemas.base import BaseSchema, SearchParams


class SupervisionesSearchParams(SearchParams):
    """Filtros de la búsqueda de supervisiones."""

    ubigeo: str | None = None
    codigo_dna: str | None = None
    fecha_desde: date | None = None
    fecha_hasta: date | None = None
    supervisor: int | None = None


class SupervisionRecord(BaseSchema):
    """Supervisión con supervisor, modalidad, DEMUNA y ubicación resueltos."""

    nid_supervision: int
    codigo_dna: str
    fecha: date
    supervisor: str
    modalidad: str
    ficha: str | None = None
    doc_seguimiento: str | None = None
    subsanacion: bool | None = None
    doc_reiterativo: str | None = None
    doc_oci: str | None = None
    fecha_cierre: date | None = None
    doc_cierre: str | None = None
    tipo_cierre: str | None = None
    nombre_demuna: str
    departamento: str
    provincia: str
    distrito: str
    enlace_sisdna: str


class SeguimientoUpdate(BaseSchema):
    """Registro o actualización del seguimiento de una supervisión."""

    txt_informe_seguimiento: str | None = Field(None, max_length=500)
    flg_subsanacion: bool | None = None
    txt_oficio_reiterativo: str | None = Field(None, max_length=500)
    txt_oficio_oci: str | None = Field(None, max_length=500)
    fecha_cierre: date | None = None
    txt_proveido_cierre: str | None = Field(None, max_length=500)
    nid_modalidad_cierre: str | None = None


class SupervisorOption(BaseSchema):
    """Opción del filtro de supervisor."""

    codigo_supervisor: int
    nombre_supervisor: str


class ModalidadOption(BaseSchema):
    """Opción de modalidad de supervisión."""

    nid_modalidad: int
    nombre_modalidad: str
