"""
Endpoints de Autenticación.

Login del personal con cookie de sesión firmada.
"""

from fastapi import APIRouter, Response

from demuna.core.dependencies import Auth, CurrentUser, clear_session_cookie, set_session_cookie
from demuna.schemas.auth import LoginRequest, SessionUser
from demuna.schemas.base import APIResponse

router = APIRouter(prefix="/auth", tags=["Autenticación"])


@router.post("/login", response_model=APIResponse[SessionUser])
async def login(
    request: LoginRequest,
    response: Response,
    service: Auth,
) -> APIResponse[SessionUser]:
    """
    Login con correo y contraseña.

    Deja la sesión en una cookie httponly; el token no se expone en el cuerpo.
    """
    user, token = service.login(request.email, request.password)
    set_session_cookie(response, token)
    return APIResponse(success=True, data=user, message="Sesión iniciada")


@router.post("/logout", response_model=APIResponse[None])
async def logout(response: Response) -> APIResponse[None]:
    """Cierra la sesión eliminando la cookie."""
    clear_session_cookie(response)
    return APIResponse(success=True, message="Sesión cerrada")


@router.get("/me", response_model=APIResponse[SessionUser])
async def get_me(current_user: CurrentUser) -> APIResponse[SessionUser]:
    """Retorna el usuario de la sesión actual."""
    return APIResponse(success=True, data=current_user)
