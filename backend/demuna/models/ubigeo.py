"""
Modelo de ubigeos (división político-administrativa del Perú).
"""

import enum

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from demuna.db.base import Base


class NivelUbigeo(str, enum.Enum):
    """Nivel del ubigeo dentro de la jerarquía."""

    DEPARTAMENTO = "Departamento"
    PROVINCIA = "Provincia"
    DISTRITO = "Distrito"


class Ubigeo(Base):
    """Departamento, provincia o distrito identificado por un código de 6 dígitos."""

    __tablename__ = "ubigeos"

    codigo_ubigeo: Mapped[str] = mapped_column(String(6), primary_key=True)
    txt_nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    txt_nivel: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    codigo_padre: Mapped[str | None] = mapped_column(String(6), index=True)

    def __repr__(self) -> str:
        return f"<Ubigeo(codigo='{self.codigo_ubigeo}', nombre='{self.txt_nombre}')>"
