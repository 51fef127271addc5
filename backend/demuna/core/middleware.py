"""
Handlers de excepción y middleware de contexto de petición.

Convierte excepciones en respuestas HTTP estandarizadas con el formato
{success: false, error: {code, message, retryable}}.
"""

import time
import traceback
import uuid

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from demuna.core.config import settings
from demuna.core.exceptions import (
    AuthenticationError,
    BackendError,
    BusinessRuleError,
    DemunaException,
    LookupTimeoutError,
    ResourceNotFoundError,
    SupersededRequestError,
    ValidationError,
)
from demuna.schemas.base import ErrorDetail, ErrorResponse

logger = structlog.get_logger()

REQUEST_ID_HEADER = b"x-request-id"


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    details: dict | None = None,
) -> JSONResponse:
    """Crea una respuesta de error estandarizada."""
    body = ErrorResponse(
        error=ErrorDetail(
            code=code,
            message=message,
            retryable=bool(details and details.get("retryable")),
            details=details if details and settings.DEBUG else None,
        )
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def demuna_exception_handler(request: Request, exc: DemunaException) -> JSONResponse:
    """Handler para las excepciones de la aplicación."""
    logger.warning(
        "Excepción de aplicación",
        code=exc.code,
        message=exc.message,
        path=request.url.path,
        details=exc.details,
    )

    # El orden importa: subclases antes que sus bases
    status_map = {
        AuthenticationError: status.HTTP_401_UNAUTHORIZED,
        ResourceNotFoundError: status.HTTP_404_NOT_FOUND,
        ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
        BusinessRuleError: status.HTTP_400_BAD_REQUEST,
        SupersededRequestError: status.HTTP_409_CONFLICT,
        LookupTimeoutError: status.HTTP_504_GATEWAY_TIMEOUT,
        BackendError: status.HTTP_502_BAD_GATEWAY,
    }

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for exc_type, http_status in status_map.items():
        if isinstance(exc, exc_type):
            status_code = http_status
            break

    return create_error_response(
        status_code=status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler para excepciones no tratadas."""
    logger.error(
        "Excepción no tratada",
        exc_type=type(exc).__name__,
        message=str(exc),
        path=request.url.path,
        traceback=traceback.format_exc() if settings.DEBUG else None,
    )

    message = "Error interno del servidor"
    details = None

    if settings.DEBUG:
        message = str(exc)
        details = {"traceback": traceback.format_exc()}

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="INTERNAL_ERROR",
        message=message,
        details=details,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Parámetros o cuerpo mal formados, con el mismo formato de error."""
    campos = [".".join(str(parte) for parte in error["loc"]) for error in exc.errors()]
    logger.info("Petición inválida", campos=campos, path=request.url.path)
    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        code="VALIDATION_ERROR",
        message=f"Datos inválidos: {', '.join(campos)}",
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Registra los handlers de excepción en la aplicación."""
    app.add_exception_handler(DemunaException, demuna_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, generic_exception_handler)


class RequestContextMiddleware:
    """
    Middleware que agrega contexto a las peticiones.

    Asocia request_id, ruta y método al contexto de log, devuelve el
    request_id en x-request-id y registra el estado y la duración.
    El request_id recibido del proxy se conserva.
    """

    def __init__(self, app: FastAPI):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _incoming_request_id(scope) or str(uuid.uuid4())[:8]
        started = time.perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=scope.get("path", ""),
            method=scope.get("method", ""),
        )

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = list(message.get("headers", []))
                headers.append((REQUEST_ID_HEADER, request_id.encode()))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            logger.info(
                "Petición atendida",
                status=status_code,
                duracion_ms=round((time.perf_counter() - started) * 1000, 1),
            )


def _incoming_request_id(scope) -> str | None:
    for name, value in scope.get("headers", []):
        if name == REQUEST_ID_HEADER:
            return value.decode("latin-1")[:64] or None
    return None
