"""
Schemas de reportes estadísticos de defensorías.
"""

from pydantic import BaseModel, Field


class DepartamentoStat(BaseModel):
    departamento: str
    cantidad: int
    porcentaje: float


class EstadoStat(BaseModel):
    estado: str
    cantidad: int
    porcentaje: float
    color: str


class TipoStat(BaseModel):
    tipo: str
    cantidad: int
    porcentaje: float


class DnaStats(BaseModel):
    """Estadísticas generales de defensorías para los filtros dados."""

    total_defensorias: int = 0
    acreditadas: int = 0
    no_acreditadas: int = 0
    no_operativas: int = 0
    por_departamento: list[DepartamentoStat] = Field(default_factory=list)
    por_estado: list[EstadoStat] = Field(default_factory=list)
    por_tipo: list[TipoStat] = Field(default_factory=list)


class MapPoint(BaseModel):
    """Valor por departamento para el mapa de calor."""

    id: str
    value: int
    tooltip: str
