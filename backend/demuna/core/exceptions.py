"""
Excepciones propias de la aplicación.

Define la jerarquía de excepciones para un tratamiento consistente de errores.
"""

from typing import Any


class DemunaException(Exception):
    """Excepción base del dashboard SISDNA."""

    def __init__(
        self,
        message: str,
        code: str = "DEMUNA_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# === Autenticación ===

class AuthenticationError(DemunaException):
    """Error de autenticación."""

    def __init__(self, message: str = "Credenciales inválidas"):
        super().__init__(message, code="AUTH_ERROR")


class InvalidCredentialsError(AuthenticationError):
    """Correo o contraseña incorrectos."""

    def __init__(self):
        super().__init__("Correo o contraseña incorrectos")
        self.code = "INVALID_CREDENTIALS"


class InvalidSessionError(AuthenticationError):
    """Cookie de sesión ausente, alterada o ilegible."""

    def __init__(self, message: str = "Sesión inválida"):
        super().__init__(message)
        self.code = "INVALID_SESSION"


class SessionExpiredError(AuthenticationError):
    """Sesión vencida por tiempo o por inactividad."""

    def __init__(self, message: str = "Sesión expirada"):
        super().__init__(message)
        self.code = "SESSION_EXPIRED"


# === Recursos ===

class ResourceNotFoundError(DemunaException):
    """Recurso no encontrado."""

    def __init__(
        self,
        resource_type: str,
        resource_id: int | str | None = None,
    ):
        message = f"{resource_type} no encontrado"
        if resource_id is not None:
            message = f"{resource_type} con código {resource_id} no encontrado"
        super().__init__(message, code="NOT_FOUND")
        self.resource_type = resource_type
        self.resource_id = resource_id


# === Validación ===

class ValidationError(DemunaException):
    """Error de validación de datos de entrada."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
    ):
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class InvalidDateRangeError(ValidationError):
    """Rango de fechas con inicio posterior al fin."""

    def __init__(self, field: str = "fecha_desde"):
        super().__init__(
            "La fecha inicial no puede ser posterior a la fecha final",
            field=field,
        )
        self.code = "INVALID_DATE_RANGE"


class InvalidUbigeoError(ValidationError):
    """Código de ubigeo mal formado."""

    def __init__(self, ubigeo: str):
        super().__init__(f"Código de ubigeo inválido: {ubigeo}", field="ubigeo")
        self.code = "INVALID_UBIGEO"


# === Negocio ===

class BusinessRuleError(DemunaException):
    """Violación de una regla de negocio."""

    def __init__(self, message: str, rule: str | None = None):
        super().__init__(message, code="BUSINESS_RULE_VIOLATION")
        self.rule = rule


# === Backend de datos ===

class BackendError(DemunaException):
    """Fallo al consultar la base de datos."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message, code="BACKEND_ERROR")
        self.operation = operation


class LookupTimeoutError(BackendError):
    """La consulta superó el tiempo máximo; puede reintentarse."""

    def __init__(self, resource: str, timeout: float):
        super().__init__(
            f"La consulta de {resource} superó el tiempo de espera ({timeout:g}s)",
            operation=resource,
        )
        self.code = "LOOKUP_TIMEOUT"
        self.details = {"retryable": True}


class SupersededRequestError(DemunaException):
    """Consulta cancelada porque una más reciente la reemplazó."""

    def __init__(self, resource: str):
        super().__init__(
            f"Consulta de {resource} reemplazada por una más reciente",
            code="REQUEST_SUPERSEDED",
        )
        self.resource = resource
