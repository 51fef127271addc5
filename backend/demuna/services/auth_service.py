"""
Service de Autenticación.

Valida la cuenta del personal configurada y emite el token de sesión
firmado que viaja en la cookie.
"""

import structlog

from demuna.core.config import settings
from demuna.core.exceptions import InvalidCredentialsError
from demuna.core.security import create_session_token, verify_password
from demuna.schemas.auth import SessionUser

logger = structlog.get_logger()


class AuthService:
    """
    Service de autenticación del personal.

    La cuenta se define por configuración (STAFF_EMAIL y STAFF_PASSWORD_HASH);
    sin hash configurado ningún login es válido.
    """

    def __init__(
        self,
        staff_email: str | None = None,
        staff_name: str | None = None,
        staff_password_hash: str | None = None,
    ):
        self.staff_email = (staff_email or settings.STAFF_EMAIL).lower()
        self.staff_name = staff_name or settings.STAFF_NAME
        self.staff_password_hash = (
            staff_password_hash if staff_password_hash is not None else settings.STAFF_PASSWORD_HASH
        )

    def authenticate(self, email: str, password: str) -> SessionUser:
        """
        Verifica las credenciales.

        Raises:
            InvalidCredentialsError: Correo distinto o contraseña incorrecta
        """
        if email.lower() != self.staff_email:
            logger.warning("Login fallido: correo desconocido", email=email)
            raise InvalidCredentialsError()

        if not verify_password(password, self.staff_password_hash):
            logger.warning("Login fallido: contraseña inválida", email=email)
            raise InvalidCredentialsError()

        return SessionUser(email=self.staff_email, name=self.staff_name)

    def login(self, email: str, password: str) -> tuple[SessionUser, str]:
        """Autentica y retorna el usuario junto con su token de sesión."""
        user = self.authenticate(email, password)
        token = create_session_token(email=user.email, name=user.name)
        logger.info("Login realizado", email=user.email)
        return user, token
