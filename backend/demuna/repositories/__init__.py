"""Repositories - Capa de acceso a datos."""

from demuna.repositories.base import BaseRepository
from demuna.repositories.defensoria_repository import DefensoriaRepository
from demuna.repositories.supervision_repository import SupervisionRepository
from demuna.repositories.ubigeo_repository import UbigeoRepository

__all__ = [
    # Base
    "BaseRepository",
    # Entidades
    "DefensoriaRepository",
    "SupervisionRepository",
    "UbigeoRepository",
]
