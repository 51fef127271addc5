"""
Configuración de logging estructurado con structlog.

En producción los logs se emiten como JSON; en DEBUG, con colores y legibles.
Los valores de credenciales y de la cookie de sesión nunca llegan al log.
"""

import logging
import sys
from typing import Any

import structlog

from demuna.core.config import settings

SENSITIVE_KEYS = frozenset({"password", "token", "cookie", "secret", settings.SESSION_COOKIE_NAME})
REDACTED = "***"


def redact_sensitive(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Oculta los campos con credenciales o tokens."""
    for key in event_dict:
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
    return event_dict


def setup_logging(debug: bool | None = None) -> None:
    """Configura el logging estructurado de la aplicación."""
    debug = settings.DEBUG if debug is None else debug

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_sensitive,
        structlog.processors.StackInfoRenderer(),
    ]

    if debug:
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer(colors=True)
    else:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )
    # El SQL de cada consulta solo interesa al depurar los filtros
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if debug else logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
