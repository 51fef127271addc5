"""
Schemas de autenticación.
"""

from pydantic import EmailStr, Field

from demuna.schemas.base import BaseSchema


class LoginRequest(BaseSchema):
    """Credenciales del personal."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class SessionUser(BaseSchema):
    """Identidad guardada en la sesión firmada."""

    email: str
    name: str | None = None
