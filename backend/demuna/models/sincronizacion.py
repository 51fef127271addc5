"""
Estados de sincronización con el sistema de registro SISDNA.
"""

import enum

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from demuna.db.base import Base


class EstadoSincronizacion(str, enum.Enum):
    """Estado de un registro frente a SISDNA (valor = nombre mostrado)."""

    ACTUALIZADA = "ACTUALIZADA"
    NO_ACTUALIZADA = "NO ACTUALIZADA"
    FALTANTE = "FALTANTE"

    @classmethod
    def parse(cls, nombre: str | None) -> "EstadoSincronizacion | None":
        """Convierte el nombre del catálogo en el enum; None si no se reconoce."""
        if not nombre:
            return None
        try:
            return cls(nombre.strip().upper())
        except ValueError:
            return None


class SincronizacionEstado(Base):
    """Catálogo de estados de sincronización."""

    __tablename__ = "sincronizacion_estados"

    nid_estado: Mapped[str] = mapped_column(String(20), primary_key=True)
    nombre_estado: Mapped[str] = mapped_column(String(100), nullable=False)
