"""
Pruebas de los endpoints HTTP: códigos de estado, formato de error y
capacidades de cada vista.
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import text

from demuna.core.dependencies import get_ubigeos_service
from demuna.core.exceptions import LookupTimeoutError, SupersededRequestError
from demuna.main import app


class UbigeosFallidos:
    """Servicio de ubigeos que siempre falla con el error indicado."""

    def __init__(self, error: Exception):
        self.error = error

    async def get_departamentos(self, cliente=None):
        raise self.error


@pytest.mark.asyncio
async def test_directorio_publico(unauthenticated_client: AsyncClient):
    response = await unauthenticated_client.get("/api/v1/directorio", params={"ubigeo": "15"})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert {r["codigo_dna"] for r in data["data"]} == {"DNA-001", "DNA-002"}
    assert data["capabilities"] == {"editar": False, "eliminar": False, "contactar": True}


@pytest.mark.asyncio
async def test_directorio_estados(unauthenticated_client: AsyncClient):
    response = await unauthenticated_client.get("/api/v1/directorio/estados")

    assert response.status_code == 200
    valores = {e["clave_caracteristica"]: e["valor_caracteristica"] for e in response.json()["data"]}
    assert valores["b"] == "Acreditada"


@pytest.mark.asyncio
async def test_defensorias_del_personal(client: AsyncClient):
    response = await client.get(
        "/api/v1/defensorias",
        params={"estado_acreditacion": "b", "page": 1, "page_size": 10},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["capabilities"]["editar"] is True
    registro = data["data"][0]
    assert registro["departamento"] == "Lima"
    assert registro["estado_acreditacion"] == "Acreditada"


@pytest.mark.asyncio
async def test_ubigeo_invalido(client: AsyncClient):
    response = await client.get("/api/v1/defensorias", params={"ubigeo": "15A"})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_UBIGEO"


@pytest.mark.asyncio
async def test_rango_de_fechas_invalido(client: AsyncClient):
    response = await client.get(
        "/api/v1/supervisiones",
        params={"fecha_desde": "2024-06-01", "fecha_hasta": "2024-01-01"},
    )

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "INVALID_DATE_RANGE"
    assert error["retryable"] is False


@pytest.mark.asyncio
async def test_defensoria_inexistente(client: AsyncClient):
    response = await client.get("/api/v1/defensorias/DNA-404")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_registrar_responsable(client: AsyncClient):
    response = await client.post(
        "/api/v1/defensorias/DNA-002/responsables",
        json={
            "txt_nombres": "Carmen",
            "txt_apellidos": "Vargas",
            "fec_designacion": "2025-02-01",
        },
    )
    assert response.status_code == 201
    assert response.json()["data"]["txt_nombres"] == "Carmen"

    response = await client.get("/api/v1/defensorias/DNA-002")
    assert response.status_code == 200
    assert response.json()["data"]["responsable"]["txt_apellidos"] == "Vargas"


@pytest.mark.asyncio
async def test_cargar_responsables(client: AsyncClient):
    response = await client.post(
        "/api/v1/defensorias/responsables",
        json={"codigos_dna": ["DNA-001", "DNA-003"]},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["DNA-001"]["txt_nombres"] == "María"
    assert data["DNA-003"] is None


@pytest.mark.asyncio
async def test_seguimiento_con_cierre_anterior(client: AsyncClient):
    response = await client.put(
        "/api/v1/supervisiones/1/seguimiento",
        json={"fecha_cierre": "2024-01-01"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "BUSINESS_RULE_VIOLATION"


@pytest.mark.asyncio
async def test_seguimiento_de_supervision_inexistente(client: AsyncClient):
    response = await client.put("/api/v1/supervisiones/999/seguimiento", json={"flg_subsanacion": True})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_catalogo_de_supervisores(client: AsyncClient):
    response = await client.get("/api/v1/supervisiones/supervisores")

    assert response.status_code == 200
    data = response.json()
    assert data["degraded"] is False
    assert [s["nombre_supervisor"] for s in data["data"]] == ["Ana Torres", "Bruno Díaz"]


@pytest.mark.asyncio
async def test_catalogo_degradado(client: AsyncClient, engine):
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE sincronizacion_estados"))

    response = await client.get("/api/v1/sincronizacion/estados")

    assert response.status_code == 200
    data = response.json()
    assert data["degraded"] is True
    assert data["data"] == []


@pytest.mark.asyncio
async def test_reporte_de_defensorias(client: AsyncClient):
    response = await client.get("/api/v1/reportes/defensorias")

    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["total_defensorias"] == 3
    assert stats["por_departamento"][0] == {"departamento": "Lima", "cantidad": 2, "porcentaje": 66.67}

    response = await client.get("/api/v1/reportes/defensorias/mapa", params={"ubigeo": "07"})
    assert response.json()["data"] == [
        {"id": "callao", "value": 1, "tooltip": "Callao: 1 defensorías (100.0%)"},
    ]


@pytest.mark.asyncio
async def test_region_de_ubigeo(unauthenticated_client: AsyncClient):
    response = await unauthenticated_client.get("/api/v1/ubigeos/150102/region")

    assert response.status_code == 200
    region = response.json()["data"]
    assert region["departamento"]["txt_nombre"] == "Lima"
    assert region["provincia"]["codigo_ubigeo"] == "150100"
    assert region["distrito"]["txt_nombre"] == "Ancón"


@pytest.mark.asyncio
async def test_provincias_del_departamento(unauthenticated_client: AsyncClient):
    response = await unauthenticated_client.get(
        "/api/v1/ubigeos/departamentos/15/provincias",
        headers={"x-client-id": "navegador-1"},
    )

    assert response.status_code == 200
    assert [p["codigo_ubigeo"] for p in response.json()["data"]] == ["150100"]


@pytest.mark.asyncio
async def test_ubigeos_sin_respuesta(client: AsyncClient):
    app.dependency_overrides[get_ubigeos_service] = lambda: UbigeosFallidos(
        LookupTimeoutError("departamentos", 5)
    )

    response = await client.get("/api/v1/ubigeos/departamentos")

    assert response.status_code == 504
    error = response.json()["error"]
    assert error["code"] == "LOOKUP_TIMEOUT"
    assert error["retryable"] is True


@pytest.mark.asyncio
async def test_ubigeos_reemplazados(client: AsyncClient):
    app.dependency_overrides[get_ubigeos_service] = lambda: UbigeosFallidos(
        SupersededRequestError("departamentos")
    )

    response = await client.get("/api/v1/ubigeos/departamentos")

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "REQUEST_SUPERSEDED"


@pytest.mark.asyncio
async def test_directorio_pagina_fuera_de_rango(unauthenticated_client: AsyncClient):
    response = await unauthenticated_client.get(
        "/api/v1/directorio",
        params={"page": 10**18, "page_size": 100},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["data"] == []
    assert data["total"] == 3


@pytest.mark.asyncio
async def test_formato_de_error(client: AsyncClient):
    response = await client.get("/api/v1/supervisiones/999")

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": {
            "code": "NOT_FOUND",
            "message": "Supervisión con código 999 no encontrado",
            "retryable": False,
        },
    }
