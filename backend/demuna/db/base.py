"""
Clase base para todos los modelos SQLAlchemy.

Las tablas pertenecen a un esquema administrado externamente; los modelos
solo describen las columnas que este sistema lee (y las pocas que escribe).
"""

from typing import Any

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Clase base de los modelos."""

    def to_dict(self) -> dict[str, Any]:
        """Convierte el modelo en diccionario."""
        return {
            column.name: getattr(self, column.name)
            for column in self.__table__.columns
        }
