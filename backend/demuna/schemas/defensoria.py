"""
Schemas de Defensorías y responsables.
"""

from datetime import date

from pydantic import EmailStr, Field

from demuna.schemas.base import BaseSchema, SearchParams


class DefensoriasSearchParams(SearchParams):
    """Filtros de la búsqueda de defensorías."""

    ubigeo: str | None = None
    codigo_dna: str | None = None
    estado_acreditacion: str | None = None


class DefensoriaRecord(BaseSchema):
    """Defensoría con los códigos reemplazados por sus nombres."""

    codigo_dna: str
    txt_nombre: str
    tipo_demuna: str = ""
    nid_ubigeo: str | None = None
    direccion: str = ""
    telefono: str = ""
    correo: str = ""
    estado_acreditacion: str = ""
    estado_acreditacion_codigo: str | None = None
    departamento: str
    provincia: str
    distrito: str
    enlace_sisdna: str


class ResponsableInfo(BaseSchema):
    """Responsable vigente de una defensoría."""

    txt_nombres: str = ""
    txt_apellidos: str = ""
    txt_correo: str = ""
    txt_telefono: str = ""
    fec_designacion: date | None = None


class DefensoriaDetail(DefensoriaRecord):
    """Detalle de una defensoría con su responsable vigente."""

    responsable: ResponsableInfo | None = None


class ResponsableCreate(BaseSchema):
    """Registro manual de un responsable por el personal."""

    txt_nombres: str = Field(..., min_length=1, max_length=255)
    txt_apellidos: str = Field(..., min_length=1, max_length=255)
    txt_correo: EmailStr | None = None
    txt_telefono: str | None = Field(None, max_length=50)
    fec_designacion: date


class ResponsablesRequest(BaseSchema):
    """Carga de responsables para varias defensorías."""

    codigos_dna: list[str] = Field(..., max_length=200)


class EstadoAcreditacionOption(BaseSchema):
    """Opción del filtro de estado de acreditación."""

    clave_caracteristica: str
    valor_caracteristica: str
