"""
Directorio público de defensorías.

Misma búsqueda que la vista del personal, sin sesión y sin acciones de edición.
"""

from typing import Annotated

from fastapi import APIRouter, Query

from demuna.core.dependencies import Defensorias
from demuna.schemas.base import PUBLIC_CAPABILITIES, CatalogResponse, PaginatedResponse
from demuna.schemas.defensoria import (
    DefensoriaRecord,
    DefensoriasSearchParams,
    EstadoAcreditacionOption,
)

router = APIRouter(prefix="/directorio", tags=["Directorio"])


@router.get("", response_model=PaginatedResponse[DefensoriaRecord])
async def buscar_directorio(
    params: Annotated[DefensoriasSearchParams, Query()],
    service: Defensorias,
) -> PaginatedResponse[DefensoriaRecord]:
    """Busca defensorías por ubigeo, código y estado de acreditación."""
    result = await service.search(params)
    return PaginatedResponse.from_result(result, PUBLIC_CAPABILITIES)


@router.get("/estados", response_model=CatalogResponse[EstadoAcreditacionOption])
async def listar_estados_directorio(service: Defensorias) -> CatalogResponse[EstadoAcreditacionOption]:
    """Opciones del filtro de estado de acreditación."""
    return CatalogResponse(data=await service.get_estados_acreditacion())
