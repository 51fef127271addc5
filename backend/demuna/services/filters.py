"""
Compilador de filtros.

Traduce los parámetros de búsqueda en predicados SQLAlchemy. Cada servicio
arma su FilterSet en un único método que usan tanto la consulta de conteo
como la de datos.
"""

from collections.abc import Iterator
from datetime import date
from typing import Any

from sqlalchemy import ColumnElement, select

from demuna.core.exceptions import InvalidDateRangeError, InvalidUbigeoError
from demuna.models.defensoria import Defensoria

UBIGEO_LENGTH = 6
DEPARTAMENTO_DIGITS = 2
PROVINCIA_DIGITS = 4

# Valor que la interfaz envía cuando no hay filtro seleccionado
ALL = "all"


def significant_length(code: str) -> int:
    """Longitud del código sin los ceros finales."""
    return len(code.rstrip("0"))


def validate_ubigeo(code: str) -> str:
    """Valida que el código tenga solo dígitos y como máximo 6 caracteres."""
    code = code.strip()
    if not code.isdigit() or len(code) > UBIGEO_LENGTH:
        raise InvalidUbigeoError(code)
    return code


def parent_codes(code: str) -> tuple[str, str, str]:
    """
    Deriva los códigos de departamento, provincia y distrito.

    >>> parent_codes("150101")
    ('150000', '150100', '150101')
    """
    return (
        code[:DEPARTAMENTO_DIGITS].ljust(UBIGEO_LENGTH, "0"),
        code[:PROVINCIA_DIGITS].ljust(UBIGEO_LENGTH, "0"),
        code,
    )


def ubigeo_predicate(column: Any, code: str | None) -> ColumnElement[bool] | None:
    """
    Filtra por ubigeo según el nivel del código.

    Hasta 2 dígitos significativos compara por departamento, hasta 4 por
    provincia y, en otro caso, el distrito exacto. Un código vacío no filtra.
    """
    if not code or not code.strip():
        return None

    code = validate_ubigeo(code)
    length = significant_length(code)

    if length <= DEPARTAMENTO_DIGITS:
        return column.startswith(code[:DEPARTAMENTO_DIGITS])
    if length <= PROVINCIA_DIGITS:
        return column.startswith(code[:PROVINCIA_DIGITS])
    return column == code


def defensoria_ubigeo_predicate(column: Any, code: str | None) -> ColumnElement[bool] | None:
    """
    Filtra por el ubigeo de la defensoría asociada (subconsulta).

    Para tablas que guardan codigo_dna y no el ubigeo.
    """
    predicate = ubigeo_predicate(Defensoria.nid_ubigeo, code)
    if predicate is None:
        return None
    return column.in_(select(Defensoria.codigo_dna).where(predicate))


def codigo_predicate(column: Any, fragment: str | None) -> ColumnElement[bool] | None:
    """Coincidencia parcial sin distinguir mayúsculas; vacío no filtra."""
    if not fragment or not fragment.strip():
        return None
    return column.icontains(fragment.strip(), autoescape=True)


def equals_predicate(column: Any, value: Any) -> ColumnElement[bool] | None:
    """Igualdad exacta; None, vacío o "all" no filtran."""
    if value is None:
        return None
    if isinstance(value, str) and (not value.strip() or value == ALL):
        return None
    return column == value


def date_range_predicates(
    column: Any,
    desde: date | None,
    hasta: date | None,
) -> list[ColumnElement[bool]]:
    """
    Rango de fechas inclusivo.

    Raises:
        InvalidDateRangeError: desde posterior a hasta (antes de consultar)
    """
    if desde and hasta and desde > hasta:
        raise InvalidDateRangeError()

    predicates = []
    if desde:
        predicates.append(column >= desde)
    if hasta:
        predicates.append(column <= hasta)
    return predicates


class FilterSet:
    """Lista ordenada de predicados; los None se descartan."""

    def __init__(self) -> None:
        self._predicates: list[ColumnElement[bool]] = []

    def add(self, predicate: ColumnElement[bool] | None) -> "FilterSet":
        if predicate is not None:
            self._predicates.append(predicate)
        return self

    def extend(self, predicates: list[ColumnElement[bool]]) -> "FilterSet":
        for predicate in predicates:
            self.add(predicate)
        return self

    def __iter__(self) -> Iterator[ColumnElement[bool]]:
        return iter(self._predicates)

    def __len__(self) -> int:
        return len(self._predicates)
