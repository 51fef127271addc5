"""
Resultado explícito de operaciones con el backend.

La capa de datos no decide si un fallo se degrada o se propaga: retorna un
Result y el llamador elige entre unwrap() y unwrap_or().
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from demuna.core.exceptions import DemunaException

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Éxito con valor o fallo con la excepción original."""

    value: T | None = None
    error: DemunaException | None = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DemunaException) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Retorna el valor o relanza el error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: T) -> T:
        """Retorna el valor o el default si hubo fallo."""
        if self.error is not None:
            return default
        return self.value  # type: ignore[return-value]
