"""
Schemas base compartidos.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from demuna.core.result import Result

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Schema base con la configuración por defecto."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class SearchParams(BaseSchema):
    """
    Parámetros de paginación comunes a todas las búsquedas.

    Sin restricciones de rango: el servicio normaliza página y tamaño.
    """

    page: int = 1
    page_size: int | None = None


class SearchResult(BaseModel, Generic[T]):
    """Página de registros junto con el total que cumple los filtros."""

    records: list[T] = Field(default_factory=list)
    total_records: int = 0
    page: int = 1
    page_size: int = 25

    @property
    def pages(self) -> int:
        """Calcula el número total de páginas."""
        if self.page_size == 0:
            return 0
        return (self.total_records + self.page_size - 1) // self.page_size


class Capabilities(BaseModel):
    """Acciones disponibles para la vista (directorio público o personal)."""

    editar: bool = False
    eliminar: bool = False
    contactar: bool = True


PUBLIC_CAPABILITIES = Capabilities(editar=False, eliminar=False, contactar=True)
STAFF_CAPABILITIES = Capabilities(editar=True, eliminar=True, contactar=True)


class APIResponse(BaseModel, Generic[T]):
    """
    Respuesta estandarizada de la API.

    Ejemplo de uso:
        return APIResponse(success=True, data=defensoria)
    """

    success: bool
    data: T | None = None
    message: str | None = None


class CatalogResponse(BaseModel, Generic[T]):
    """Catálogo para filtros; degraded=True si el backend falló."""

    success: bool = True
    data: list[T]
    degraded: bool = False
    message: str | None = None

    @classmethod
    def from_result(cls, result: "Result[list[T]]") -> "CatalogResponse[T]":
        """Lista vacía con degraded=True cuando el catálogo no se pudo cargar."""
        if result.ok:
            return cls(data=result.value)
        return cls(data=[], degraded=True, message=result.error.message)


class ErrorDetail(BaseModel):
    """Detalle de error."""

    code: str
    message: str
    retryable: bool = False
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Respuesta de error estandarizada."""

    success: bool = False
    error: ErrorDetail


class PaginatedResponse(BaseModel, Generic[T]):
    """Respuesta paginada."""

    success: bool = True
    data: list[T]
    total: int
    page: int
    page_size: int
    pages: int = 0
    capabilities: Capabilities = Field(default_factory=Capabilities)

    @classmethod
    def from_result(
        cls,
        result: SearchResult[T],
        capabilities: Capabilities | None = None,
    ) -> "PaginatedResponse[T]":
        """Construye la respuesta a partir del resultado de una búsqueda."""
        return cls(
            data=result.records,
            total=result.total_records,
            page=result.page,
            page_size=result.page_size,
            pages=result.pages,
            capabilities=capabilities or Capabilities(),
        )
