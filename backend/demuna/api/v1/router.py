"""
Router principal de la API v1.

Agrega todas las rutas organizadas por dominio.
"""

from fastapi import APIRouter

from demuna.api.v1.endpoints import (
    auth,
    defensorias,
    directorio,
    health,
    reportes,
    sincronizacion,
    supervisiones,
    ubigeos,
)

api_router = APIRouter()

# Health check
api_router.include_router(health.router, prefix="/health", tags=["Health"])

# Autenticación
api_router.include_router(auth.router)

# Directorio público
api_router.include_router(directorio.router)

# Defensorías y responsables
api_router.include_router(defensorias.router)

# Supervisiones y seguimiento
api_router.include_router(supervisiones.router)

# Sincronización con SISDNA
api_router.include_router(sincronizacion.router)

# Ubigeos
api_router.include_router(ubigeos.router)

# Reportes
api_router.include_router(reportes.router)
