"""
Pruebas del selector de ubigeos: caché, cancelación y tiempo máximo.
"""
import asyncio

import pytest

from demuna.core.exceptions import (
    InvalidUbigeoError,
    LookupTimeoutError,
    ResourceNotFoundError,
    SupersededRequestError,
)
from demuna.services.ubigeo_service import LatestRequestGate, UbigeosService


@pytest.fixture
def service(session_factory, cache) -> UbigeosService:
    return UbigeosService(session_factory, cache, timeout=2.0)


def nombres(ubigeos) -> list[str]:
    return [u.txt_nombre for u in ubigeos]


@pytest.mark.asyncio
async def test_departamentos_ordenados(service: UbigeosService):
    assert nombres(await service.get_departamentos()) == ["Callao", "Junín", "Lima"]


@pytest.mark.asyncio
async def test_provincias_y_distritos(service: UbigeosService):
    provincias = await service.get_provincias("15")
    assert [p.codigo_ubigeo for p in provincias] == ["150100"]
    assert await service.get_provincias("150000") == provincias

    distritos = await service.get_distritos("150100")
    assert nombres(distritos) == ["Ancón", "Lima"]
    assert await service.get_provincias("") == []


@pytest.mark.asyncio
async def test_listas_en_cache(service: UbigeosService, queries):
    await service.get_distritos("1501")
    queries.reset()
    await service.get_distritos("1501")
    assert queries.count == 0


@pytest.mark.asyncio
async def test_listas_alimentan_la_cache_de_nombres(service: UbigeosService, cache):
    await service.get_departamentos()
    assert cache.get("ubigeos", "070000") == "Callao"


@pytest.mark.asyncio
async def test_get_ubigeo(service: UbigeosService):
    ubigeo = await service.get_ubigeo("150102")
    assert ubigeo.txt_nombre == "Ancón"
    assert ubigeo.codigo_padre == "150100"

    with pytest.raises(ResourceNotFoundError):
        await service.get_ubigeo("999999")
    with pytest.raises(InvalidUbigeoError):
        await service.get_ubigeo("15a")


@pytest.mark.asyncio
async def test_region_info(service: UbigeosService, queries):
    queries.reset()
    region = await service.get_region_info("150102")
    assert region.departamento.txt_nombre == "Lima"
    assert region.provincia.codigo_ubigeo == "150100"
    assert region.distrito.txt_nombre == "Ancón"
    assert queries.count == 1


@pytest.mark.asyncio
async def test_region_info_por_nivel(service: UbigeosService):
    region = await service.get_region_info("07")
    assert region.departamento.txt_nombre == "Callao"
    assert region.provincia is None
    assert region.distrito is None

    vacia = await service.get_region_info(None)
    assert vacia.departamento is None


@pytest.mark.asyncio
async def test_consulta_nueva_reemplaza_a_la_anterior():
    gate = LatestRequestGate(timeout=5)
    iniciada = asyncio.Event()

    async def lenta():
        iniciada.set()
        await asyncio.sleep(10)
        return "anterior"

    async def rapida():
        return "nueva"

    primera = asyncio.create_task(gate.run("provincias", "provincias", lenta))
    await iniciada.wait()

    assert await gate.run("provincias", "provincias", rapida) == "nueva"
    with pytest.raises(SupersededRequestError):
        await primera
    assert not gate.in_flight("provincias")


@pytest.mark.asyncio
async def test_claves_distintas_no_se_cancelan():
    gate = LatestRequestGate(timeout=5)
    liberar = asyncio.Event()

    async def espera(valor):
        await liberar.wait()
        return valor

    a = asyncio.create_task(gate.run(("cliente-a", "provincias"), "provincias", lambda: espera("a")))
    b = asyncio.create_task(gate.run(("cliente-b", "provincias"), "provincias", lambda: espera("b")))
    await asyncio.sleep(0)
    liberar.set()
    assert await asyncio.gather(a, b) == ["a", "b"]


@pytest.mark.asyncio
async def test_tiempo_maximo():
    gate = LatestRequestGate(timeout=0.05)

    async def colgada():
        await asyncio.sleep(5)

    with pytest.raises(LookupTimeoutError) as exc_info:
        await gate.run("departamentos", "departamentos", colgada)
    assert exc_info.value.details["retryable"] is True
    assert exc_info.value.code == "LOOKUP_TIMEOUT"


@pytest.mark.asyncio
async def test_invalidar_listas_recarga(service: UbigeosService, cache, queries):
    await service.get_departamentos()
    queries.reset()

    await service.get_departamentos()
    assert queries.count == 0

    cache.invalidate("ubigeos_listas")
    assert nombres(await service.get_departamentos()) == ["Callao", "Junín", "Lima"]
    assert queries.count == 1
