"""
Modelos de las Defensorías Municipales del Niño y del Adolescente (DEMUNA).

Incluye la defensoría, sus personas designadas y la tabla de características.
"""

import enum
from datetime import date

from sqlalchemy import Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from demuna.db.base import Base

# Función de la persona responsable de la DEMUNA en defensoria_personas
FUNCION_RESPONSABLE = 1


class EstadoAcreditacion(str, enum.Enum):
    """Estados de acreditación (claves en defensorias_caracteristicas)."""

    NO_OPERATIVA = "a"
    ACREDITADA = "b"
    NO_ACREDITADA = "c"

    @property
    def etiqueta(self) -> str:
        return _ETIQUETAS_ACREDITACION[self]


_ETIQUETAS_ACREDITACION = {
    EstadoAcreditacion.NO_OPERATIVA: "No Operativa",
    EstadoAcreditacion.ACREDITADA: "Acreditada",
    EstadoAcreditacion.NO_ACREDITADA: "No Acreditada",
}


class Defensoria(Base):
    """Defensoría (DEMUNA) identificada por su código DNA."""

    __tablename__ = "defensorias"

    codigo_dna: Mapped[str] = mapped_column(String(20), primary_key=True)
    txt_nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    txt_tipo: Mapped[str | None] = mapped_column(String(20))
    nid_ubigeo: Mapped[str | None] = mapped_column(String(6), index=True)

    # Contacto
    txt_direccion: Mapped[str | None] = mapped_column(Text)
    txt_telefono: Mapped[str | None] = mapped_column(String(50))
    txt_correo: Mapped[str | None] = mapped_column(String(255))

    # Acreditación
    nid_estado: Mapped[str | None] = mapped_column(String(20))

    # Sincronización con SISDNA
    nid_estado_sisdna: Mapped[str | None] = mapped_column(String(20))
    txt_campos_desactualizados: Mapped[str | None] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<Defensoria(codigo_dna='{self.codigo_dna}', nombre='{self.txt_nombre}')>"


class DefensoriaPersona(Base):
    """Persona designada en una defensoría (responsable, integrante, etc.)."""

    __tablename__ = "defensoria_personas"

    nid_persona: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    codigo_dna: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    codigo_funcion: Mapped[int] = mapped_column(Integer, default=FUNCION_RESPONSABLE)

    txt_nombres: Mapped[str | None] = mapped_column(String(255))
    txt_apellidos: Mapped[str | None] = mapped_column(String(255))
    txt_correo: Mapped[str | None] = mapped_column(String(255))
    txt_telefono: Mapped[str | None] = mapped_column(String(50))
    fec_designacion: Mapped[date | None] = mapped_column(Date)


class DefensoriaCaracteristica(Base):
    """Catálogo de códigos (tipo de DEMUNA, estado de acreditación, ...)."""

    __tablename__ = "defensorias_caracteristicas"

    clave_caracteristica: Mapped[str] = mapped_column(String(20), primary_key=True)
    valor_caracteristica: Mapped[str] = mapped_column(String(255), nullable=False)
