"""
Services Layer.

Lógica de búsqueda, desnormalización y reglas del dashboard SISDNA.
"""

from demuna.services.auth_service import AuthService
from demuna.services.defensoria_service import DefensoriasService
from demuna.services.lookup_cache import LookupCache
from demuna.services.reportes_service import DnaReportesService
from demuna.services.sincronizacion_service import (
    SincronizacionService,
    SincronizacionSupervisionesService,
)
from demuna.services.supervision_service import SupervisionesService
from demuna.services.ubigeo_service import UbigeosService

__all__ = [
    "AuthService",
    "DefensoriasService",
    "DnaReportesService",
    "LookupCache",
    "SincronizacionService",
    "SincronizacionSupervisionesService",
    "SupervisionesService",
    "UbigeosService",
]
