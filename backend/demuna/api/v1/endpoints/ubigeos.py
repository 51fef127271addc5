"""
Endpoints del selector de ubigeos.

Públicos: los usa también el filtro del directorio. Una consulta nueva del
mismo cliente sobre el mismo recurso reemplaza a la anterior (409 para la
reemplazada) y una consulta lenta responde 504 reintentable.
"""

from fastapi import APIRouter, Request

from demuna.core.dependencies import Ubigeos
from demuna.schemas.base import APIResponse
from demuna.schemas.ubigeo import RegionInfo, UbigeoResponse

router = APIRouter(prefix="/ubigeos", tags=["Ubigeos"])

CLIENT_ID_HEADER = "x-client-id"


def client_key(request: Request) -> str | None:
    """Identifica al cliente para la cancelación de consultas reemplazadas."""
    client_id = request.headers.get(CLIENT_ID_HEADER)
    if client_id:
        return client_id
    return request.client.host if request.client else None


@router.get("/departamentos", response_model=APIResponse[list[UbigeoResponse]])
async def listar_departamentos(request: Request, service: Ubigeos) -> APIResponse[list[UbigeoResponse]]:
    departamentos = await service.get_departamentos(cliente=client_key(request))
    return APIResponse(success=True, data=departamentos)


@router.get(
    "/departamentos/{codigo}/provincias",
    response_model=APIResponse[list[UbigeoResponse]],
)
async def listar_provincias(
    codigo: str,
    request: Request,
    service: Ubigeos,
) -> APIResponse[list[UbigeoResponse]]:
    provincias = await service.get_provincias(codigo, cliente=client_key(request))
    return APIResponse(success=True, data=provincias)


@router.get(
    "/provincias/{codigo}/distritos",
    response_model=APIResponse[list[UbigeoResponse]],
)
async def listar_distritos(
    codigo: str,
    request: Request,
    service: Ubigeos,
) -> APIResponse[list[UbigeoResponse]]:
    distritos = await service.get_distritos(codigo, cliente=client_key(request))
    return APIResponse(success=True, data=distritos)


@router.get("/{codigo}", response_model=APIResponse[UbigeoResponse])
async def obtener_ubigeo(codigo: str, service: Ubigeos) -> APIResponse[UbigeoResponse]:
    return APIResponse(success=True, data=await service.get_ubigeo(codigo))


@router.get("/{codigo}/region", response_model=APIResponse[RegionInfo])
async def obtener_region(codigo: str, service: Ubigeos) -> APIResponse[RegionInfo]:
    """Departamento, provincia y distrito del código."""
    return APIResponse(success=True, data=await service.get_region_info(codigo))
