"""
Endpoints de reportes de defensorías.
"""

from fastapi import APIRouter, Query

from demuna.core.dependencies import CurrentUser, Reportes
from demuna.schemas.base import APIResponse
from demuna.schemas.reportes import DnaStats, MapPoint

router = APIRouter(prefix="/reportes", tags=["Reportes"])


@router.get("/defensorias", response_model=APIResponse[DnaStats])
async def estadisticas_defensorias(
    service: Reportes,
    current_user: CurrentUser,
    ubigeo: str | None = Query(None, description="Código de departamento, provincia o distrito"),
    estado_acreditacion: str | None = Query(None),
) -> APIResponse[DnaStats]:
    """Totales por estado de acreditación, departamento y tipo."""
    stats = await service.get_stats(ubigeo, estado_acreditacion)
    return APIResponse(success=True, data=stats)


@router.get("/defensorias/mapa", response_model=APIResponse[list[MapPoint]])
async def mapa_defensorias(
    service: Reportes,
    current_user: CurrentUser,
    ubigeo: str | None = Query(None),
    estado_acreditacion: str | None = Query(None),
) -> APIResponse[list[MapPoint]]:
    return APIResponse(success=True, data=await service.get_map_data(ubigeo, estado_acreditacion))
