"""
Módulo de seguridad: hashing de contraseñas y tokens de sesión firmados.

La cookie de sesión contiene un JWT firmado con SECRET_KEY; el servidor
valida firma, expiración absoluta e inactividad en cada petición.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from demuna.core.config import settings
from demuna.core.exceptions import InvalidSessionError, SessionExpiredError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def create_session_token(
    email: str,
    name: str | None = None,
    expires_at: datetime | None = None,
    now: datetime | None = None,
) -> str:
    """
    Crea el token de sesión del usuario.

    Args:
        email: Correo del usuario (subject)
        name: Nombre a mostrar
        expires_at: Expiración absoluta; por defecto ahora + SESSION_EXPIRE_MINUTES
        now: Momento de la última actividad (para pruebas)

    Returns:
        JWT firmado
    """
    now = now or datetime.now(timezone.utc)
    if expires_at is None:
        expires_at = now + timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)

    to_encode: dict[str, Any] = {
        "sub": email,
        "name": name,
        "exp": expires_at,
        "iat": now,
        "act": int(now.timestamp()),
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_session_token(token: str, now: datetime | None = None) -> dict[str, Any]:
    """
    Valida y decodifica el token de sesión.

    Raises:
        SessionExpiredError: Token vencido o inactivo más allá del límite
        InvalidSessionError: Firma o contenido inválidos
    """
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except ExpiredSignatureError:
        raise SessionExpiredError()
    except JWTError:
        raise InvalidSessionError()

    if not payload.get("sub") or "act" not in payload:
        raise InvalidSessionError()

    now = now or datetime.now(timezone.utc)
    inactivo = now.timestamp() - payload["act"]
    if inactivo >= settings.SESSION_INACTIVITY_MINUTES * 60:
        raise SessionExpiredError("Sesión cerrada por inactividad")

    return payload


def refresh_session_token(payload: dict[str, Any]) -> str:
    """Reemite el token con la actividad actualizada, sin extender la expiración."""
    return create_session_token(
        email=payload["sub"],
        name=payload.get("name"),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica si la contraseña en texto plano corresponde al hash."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Genera el hash pbkdf2 de la contraseña."""
    return pwd_context.hash(password)
