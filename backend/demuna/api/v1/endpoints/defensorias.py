"""
Endpoints de Defensorías (vista del personal).
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from demuna.core.dependencies import CurrentUser, Defensorias
from demuna.schemas.base import STAFF_CAPABILITIES, APIResponse, CatalogResponse, PaginatedResponse
from demuna.schemas.defensoria import (
    DefensoriaDetail,
    DefensoriaRecord,
    DefensoriasSearchParams,
    EstadoAcreditacionOption,
    ResponsableCreate,
    ResponsableInfo,
    ResponsablesRequest,
)

router = APIRouter(prefix="/defensorias", tags=["Defensorías"])


@router.get("", response_model=PaginatedResponse[DefensoriaRecord])
async def buscar_defensorias(
    params: Annotated[DefensoriasSearchParams, Query()],
    service: Defensorias,
    current_user: CurrentUser,
) -> PaginatedResponse[DefensoriaRecord]:
    """Lista defensorías con paginación y filtros."""
    result = await service.search(params)
    return PaginatedResponse.from_result(result, STAFF_CAPABILITIES)


@router.get("/estados", response_model=CatalogResponse[EstadoAcreditacionOption])
async def listar_estados(
    service: Defensorias,
    current_user: CurrentUser,
) -> CatalogResponse[EstadoAcreditacionOption]:
    return CatalogResponse(data=await service.get_estados_acreditacion())


@router.post("/responsables", response_model=APIResponse[dict[str, ResponsableInfo | None]])
async def cargar_responsables(
    request: ResponsablesRequest,
    service: Defensorias,
    current_user: CurrentUser,
) -> APIResponse[dict[str, ResponsableInfo | None]]:
    """
    Responsable vigente de varias defensorías.

    Las defensorías sin responsable aparecen con valor null.
    """
    responsables = await service.cargar_responsables(request.codigos_dna)
    return APIResponse(success=True, data=responsables)


@router.get("/{codigo_dna}", response_model=APIResponse[DefensoriaDetail])
async def obtener_defensoria(
    codigo_dna: str,
    service: Defensorias,
    current_user: CurrentUser,
) -> APIResponse[DefensoriaDetail]:
    """Detalle de una defensoría con su responsable vigente."""
    return APIResponse(success=True, data=await service.obtener(codigo_dna))


@router.post(
    "/{codigo_dna}/responsables",
    response_model=APIResponse[ResponsableInfo],
    status_code=status.HTTP_201_CREATED,
)
async def registrar_responsable(
    codigo_dna: str,
    datos: ResponsableCreate,
    service: Defensorias,
    current_user: CurrentUser,
) -> APIResponse[ResponsableInfo]:
    """Registra un responsable de la defensoría."""
    responsable = await service.registrar_responsable(codigo_dna, datos)
    return APIResponse(
        success=True,
        data=responsable,
        message="Responsable registrado con éxito",
    )
