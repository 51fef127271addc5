"""
Modelos SQLAlchemy del dashboard SISDNA.

Importa todos los modelos para registrarlos en el metadata.
"""

from demuna.models.defensoria import (
    FUNCION_RESPONSABLE,
    Defensoria,
    DefensoriaCaracteristica,
    DefensoriaPersona,
    EstadoAcreditacion,
)
from demuna.models.sincronizacion import EstadoSincronizacion, SincronizacionEstado
from demuna.models.supervision import (
    SeguimientoCierreTipo,
    Supervision,
    SupervisionFicha,
    SupervisionModalidad,
    SupervisionSeguimiento,
    Supervisor,
)
from demuna.models.ubigeo import NivelUbigeo, Ubigeo

__all__ = [
    # Defensorías
    "Defensoria",
    "DefensoriaPersona",
    "DefensoriaCaracteristica",
    "EstadoAcreditacion",
    "FUNCION_RESPONSABLE",
    # Ubigeos
    "Ubigeo",
    "NivelUbigeo",
    # Supervisiones
    "Supervision",
    "Supervisor",
    "SupervisionModalidad",
    "SupervisionFicha",
    "SupervisionSeguimiento",
    "SeguimientoCierreTipo",
    # Sincronización
    "SincronizacionEstado",
    "EstadoSincronizacion",
]
