"""
Pruebas del compilador de filtros.
"""
from datetime import date

import pytest
from sqlalchemy.dialects import postgresql

from demuna.core.exceptions import InvalidDateRangeError, InvalidUbigeoError
from demuna.models.defensoria import Defensoria
from demuna.services.filters import (
    ALL,
    FilterSet,
    codigo_predicate,
    date_range_predicates,
    defensoria_ubigeo_predicate,
    equals_predicate,
    parent_codes,
    significant_length,
    ubigeo_predicate,
)


def compile_sql(predicate) -> str:
    return str(
        predicate.compile(
            dialect=postgresql.dialect(),
            compile_kwargs={"literal_binds": True},
        )
    )


@pytest.mark.parametrize(
    "code,expected",
    [("150000", 2), ("150100", 4), ("150101", 6), ("15", 2), ("000000", 0)],
)
def test_significant_length(code, expected):
    assert significant_length(code) == expected


def test_parent_codes():
    assert parent_codes("150101") == ("150000", "150100", "150101")
    assert parent_codes("070000") == ("070000", "070000", "070000")


@pytest.mark.parametrize("code", [None, "", "   "])
def test_ubigeo_predicate_sin_codigo_no_filtra(code):
    assert ubigeo_predicate(Defensoria.nid_ubigeo, code) is None


def test_ubigeo_predicate_departamento_usa_prefijo():
    sql = compile_sql(ubigeo_predicate(Defensoria.nid_ubigeo, "150000"))
    assert "LIKE" in sql
    assert "'15'" in sql


def test_ubigeo_predicate_provincia_usa_prefijo():
    sql = compile_sql(ubigeo_predicate(Defensoria.nid_ubigeo, "1501"))
    assert "LIKE" in sql
    assert "'1501'" in sql


def test_ubigeo_predicate_distrito_es_exacto():
    sql = compile_sql(ubigeo_predicate(Defensoria.nid_ubigeo, "150101"))
    assert sql == "defensorias.nid_ubigeo = '150101'"


@pytest.mark.parametrize("code", ["15a", "1501011", "15-01"])
def test_ubigeo_invalido(code):
    with pytest.raises(InvalidUbigeoError):
        ubigeo_predicate(Defensoria.nid_ubigeo, code)


def test_defensoria_ubigeo_predicate_es_subconsulta():
    sql = compile_sql(defensoria_ubigeo_predicate(Defensoria.codigo_dna, "15"))
    assert "IN (SELECT defensorias.codigo_dna" in sql
    assert defensoria_ubigeo_predicate(Defensoria.codigo_dna, None) is None


def test_codigo_predicate():
    assert codigo_predicate(Defensoria.codigo_dna, None) is None
    assert codigo_predicate(Defensoria.codigo_dna, "  ") is None
    sql = compile_sql(codigo_predicate(Defensoria.codigo_dna, " dna-0 "))
    assert "LIKE" in sql
    assert "dna-0" in sql


def test_codigo_predicate_escapa_comodines():
    sql = compile_sql(codigo_predicate(Defensoria.codigo_dna, "50%"))
    assert "50/%" in sql


@pytest.mark.parametrize("value", [None, "", ALL])
def test_equals_predicate_sin_valor_no_filtra(value):
    assert equals_predicate(Defensoria.nid_estado, value) is None


def test_equals_predicate():
    sql = compile_sql(equals_predicate(Defensoria.nid_estado, "b"))
    assert sql == "defensorias.nid_estado = 'b'"


def test_date_range_invalido():
    """Un rango invertido se rechaza antes de consultar."""
    with pytest.raises(InvalidDateRangeError):
        date_range_predicates(Defensoria.codigo_dna, date(2024, 5, 1), date(2024, 1, 1))


def test_date_range_parcial():
    assert len(date_range_predicates(Defensoria.codigo_dna, date(2024, 1, 1), None)) == 1
    assert len(date_range_predicates(Defensoria.codigo_dna, None, None)) == 0
    assert len(date_range_predicates(Defensoria.codigo_dna, date(2024, 1, 1), date(2024, 1, 1))) == 2


def test_filter_set_descarta_none():
    filters = (
        FilterSet()
        .add(ubigeo_predicate(Defensoria.nid_ubigeo, None))
        .add(equals_predicate(Defensoria.nid_estado, "b"))
        .extend([Defensoria.codigo_dna == "DNA-001"])
    )
    assert len(filters) == 2
    assert len(list(filters)) == 2
