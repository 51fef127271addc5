"""
Endpoints del estado de sincronización con SISDNA.
"""

from typing import Annotated

from fastapi import APIRouter, Query

from demuna.core.dependencies import CurrentUser, Sincronizacion, SincronizacionSupervisiones
from demuna.schemas.base import STAFF_CAPABILITIES, CatalogResponse, PaginatedResponse
from demuna.schemas.sincronizacion import (
    DefensoriaSincronizacion,
    EstadoSincronizacionOption,
    SincronizacionSearchParams,
    SincronizacionSupervisionesSearchParams,
    SupervisionSincronizacion,
)

router = APIRouter(prefix="/sincronizacion", tags=["Sincronización"])


@router.get("/defensorias", response_model=PaginatedResponse[DefensoriaSincronizacion])
async def buscar_defensorias_sincronizacion(
    params: Annotated[SincronizacionSearchParams, Query()],
    service: Sincronizacion,
    current_user: CurrentUser,
) -> PaginatedResponse[DefensoriaSincronizacion]:
    """Defensorías con su estado en SISDNA y los campos desactualizados."""
    result = await service.search(params)
    return PaginatedResponse.from_result(result, STAFF_CAPABILITIES)


@router.get("/supervisiones", response_model=PaginatedResponse[SupervisionSincronizacion])
async def buscar_supervisiones_sincronizacion(
    params: Annotated[SincronizacionSupervisionesSearchParams, Query()],
    service: SincronizacionSupervisiones,
    current_user: CurrentUser,
) -> PaginatedResponse[SupervisionSincronizacion]:
    result = await service.search(params)
    return PaginatedResponse.from_result(result, STAFF_CAPABILITIES)


@router.get("/estados", response_model=CatalogResponse[EstadoSincronizacionOption])
async def listar_estados_sincronizacion(
    service: Sincronizacion,
    current_user: CurrentUser,
) -> CatalogResponse[EstadoSincronizacionOption]:
    return CatalogResponse.from_result(await service.get_estados_sincronizacion())
