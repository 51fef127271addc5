"""
Schemas de ubigeos.
"""

from demuna.schemas.base import BaseSchema


class UbigeoResponse(BaseSchema):
    """Ubigeo del catálogo."""

    codigo_ubigeo: str
    txt_nombre: str
    txt_nivel: str
    codigo_padre: str | None = None


class RegionInfo(BaseSchema):
    """Departamento, provincia y distrito de un código."""

    departamento: UbigeoResponse | None = None
    provincia: UbigeoResponse | None = None
    distrito: UbigeoResponse | None = None
