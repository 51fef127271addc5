"""Schemas Pydantic para validación de request/response."""

from demuna.schemas.auth import LoginRequest, SessionUser
from demuna.schemas.base import (
    PUBLIC_CAPABILITIES,
    STAFF_CAPABILITIES,
    APIResponse,
    BaseSchema,
    Capabilities,
    CatalogResponse,
    ErrorDetail,
    ErrorResponse,
    PaginatedResponse,
    SearchParams,
    SearchResult,
)
from demuna.schemas.defensoria import (
    DefensoriaDetail,
    DefensoriaRecord,
    DefensoriasSearchParams,
    EstadoAcreditacionOption,
    ResponsableCreate,
    ResponsableInfo,
    ResponsablesRequest,
)
from demuna.schemas.reportes import DepartamentoStat, DnaStats, EstadoStat, MapPoint, TipoStat
from demuna.schemas.sincronizacion import (
    DefensoriaSincronizacion,
    EstadoSincronizacionOption,
    SincronizacionSearchParams,
    SincronizacionSupervisionesSearchParams,
    SupervisionSincronizacion,
)
from demuna.schemas.supervision import (
    ModalidadOption,
    SeguimientoUpdate,
    SupervisionesSearchParams,
    SupervisionRecord,
    SupervisorOption,
)
from demuna.schemas.ubigeo import RegionInfo, UbigeoResponse

__all__ = [
    # Base
    "BaseSchema",
    "APIResponse",
    "CatalogResponse",
    "PaginatedResponse",
    "SearchParams",
    "SearchResult",
    "Capabilities",
    "PUBLIC_CAPABILITIES",
    "STAFF_CAPABILITIES",
    "ErrorDetail",
    "ErrorResponse",
    # Auth
    "LoginRequest",
    "SessionUser",
    # Defensorías
    "DefensoriasSearchParams",
    "DefensoriaRecord",
    "DefensoriaDetail",
    "ResponsableInfo",
    "ResponsableCreate",
    "ResponsablesRequest",
    "EstadoAcreditacionOption",
    # Supervisiones
    "SupervisionesSearchParams",
    "SupervisionRecord",
    "SeguimientoUpdate",
    "SupervisorOption",
    "ModalidadOption",
    # Sincronización
    "SincronizacionSearchParams",
    "SincronizacionSupervisionesSearchParams",
    "DefensoriaSincronizacion",
    "SupervisionSincronizacion",
    "EstadoSincronizacionOption",
    # Ubigeos
    "UbigeoResponse",
    "RegionInfo",
    # Reportes
    "DnaStats",
    "DepartamentoStat",
    "EstadoStat",
    "TipoStat",
    "MapPoint",
]
