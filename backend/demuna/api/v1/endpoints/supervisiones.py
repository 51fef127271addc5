"""
Endpoints de Supervisiones y su seguimiento.
"""

from typing import Annotated

from fastapi import APIRouter, Query

from demuna.core.dependencies import CurrentUser, Supervisiones
from demuna.schemas.base import STAFF_CAPABILITIES, APIResponse, CatalogResponse, PaginatedResponse
from demuna.schemas.supervision import (
    ModalidadOption,
    SeguimientoUpdate,
    SupervisionesSearchParams,
    SupervisionRecord,
    SupervisorOption,
)

router = APIRouter(prefix="/supervisiones", tags=["Supervisiones"])


@router.get("", response_model=PaginatedResponse[SupervisionRecord])
async def buscar_supervisiones(
    params: Annotated[SupervisionesSearchParams, Query()],
    service: Supervisiones,
    current_user: CurrentUser,
) -> PaginatedResponse[SupervisionRecord]:
    """
    Lista supervisiones con paginación.

    Filtros: ubigeo de la DEMUNA, código DNA, rango de fechas y supervisor.
    """
    result = await service.search(params)
    return PaginatedResponse.from_result(result, STAFF_CAPABILITIES)


@router.get("/supervisores", response_model=CatalogResponse[SupervisorOption])
async def listar_supervisores(
    service: Supervisiones,
    current_user: CurrentUser,
) -> CatalogResponse[SupervisorOption]:
    """Supervisores activos; lista vacía con degraded=true si falla la carga."""
    return CatalogResponse.from_result(await service.get_supervisores())


@router.get("/modalidades", response_model=CatalogResponse[ModalidadOption])
async def listar_modalidades(
    service: Supervisiones,
    current_user: CurrentUser,
) -> CatalogResponse[ModalidadOption]:
    return CatalogResponse.from_result(await service.get_modalidades())


@router.get("/{nid_supervision}", response_model=APIResponse[SupervisionRecord])
async def obtener_supervision(
    nid_supervision: int,
    service: Supervisiones,
    current_user: CurrentUser,
) -> APIResponse[SupervisionRecord]:
    return APIResponse(success=True, data=await service.obtener(nid_supervision))


@router.put("/{nid_supervision}/seguimiento", response_model=APIResponse[SupervisionRecord])
async def registrar_seguimiento(
    nid_supervision: int,
    datos: SeguimientoUpdate,
    service: Supervisiones,
    current_user: CurrentUser,
) -> APIResponse[SupervisionRecord]:
    """Registra o actualiza el seguimiento de la supervisión."""
    supervision = await service.registrar_seguimiento(nid_supervision, datos)
    return APIResponse(
        success=True,
        data=supervision,
        message="Seguimiento registrado con éxito",
    )
