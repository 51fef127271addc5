"""
Pruebas del service de defensorías y la regla del responsable vigente.
"""
from datetime import date
from types import SimpleNamespace

import pytest

from demuna.core.exceptions import ResourceNotFoundError
from demuna.models.defensoria import FUNCION_RESPONSABLE, DefensoriaPersona
from demuna.repositories.defensoria_repository import DefensoriaRepository
from demuna.schemas.defensoria import ResponsableCreate
from demuna.services.defensoria_service import DefensoriasService, seleccionar_responsable_reciente


@pytest.fixture
def service(session_factory, cache) -> DefensoriasService:
    return DefensoriasService(session_factory, cache)


def test_responsable_mas_reciente():
    personas = [
        SimpleNamespace(nombre="antigua", fec_designacion=date(2023, 1, 1)),
        SimpleNamespace(nombre="reciente", fec_designacion=date(2024, 6, 15)),
        SimpleNamespace(nombre="sin fecha", fec_designacion=None),
    ]
    assert seleccionar_responsable_reciente(personas).fec_designacion == date(2024, 6, 15)


def test_responsable_sin_fechas_y_sin_personas():
    solo = SimpleNamespace(fec_designacion=None)
    assert seleccionar_responsable_reciente([solo]) is solo
    assert seleccionar_responsable_reciente([]) is None


@pytest.mark.asyncio
async def test_obtener_con_responsable(service: DefensoriasService):
    detalle = await service.obtener("DNA-001")
    assert detalle.txt_nombre == "DEMUNA Lima Cercado"
    assert detalle.responsable is not None
    assert detalle.responsable.txt_nombres == "María"
    assert detalle.responsable.fec_designacion == date(2024, 6, 15)


@pytest.mark.asyncio
async def test_obtener_inexistente(service: DefensoriasService):
    with pytest.raises(ResourceNotFoundError):
        await service.obtener("DNA-404")


@pytest.mark.asyncio
async def test_cargar_responsables_cachea_ausentes(service: DefensoriasService, queries):
    responsables = await service.cargar_responsables(["DNA-001", "DNA-002", "DNA-001"])
    assert set(responsables) == {"DNA-001", "DNA-002"}
    assert responsables["DNA-001"].txt_apellidos == "Huamán"
    assert responsables["DNA-002"] is None

    queries.reset()
    again = await service.cargar_responsables(["DNA-001", "DNA-002"])
    assert again == responsables
    assert queries.count == 0


@pytest.mark.asyncio
async def test_registrar_responsable_invalida_cache(service: DefensoriasService):
    assert (await service.cargar_responsables(["DNA-002"]))["DNA-002"] is None

    creado = await service.registrar_responsable(
        "DNA-002",
        ResponsableCreate(
            txt_nombres="Carmen",
            txt_apellidos="Rojas",
            txt_correo="crojas@munancon.gob.pe",
            fec_designacion=date(2024, 2, 1),
        ),
    )
    assert creado.txt_nombres == "Carmen"

    responsables = await service.cargar_responsables(["DNA-002"])
    assert responsables["DNA-002"].txt_apellidos == "Rojas"


@pytest.mark.asyncio
async def test_registrar_responsable_defensoria_inexistente(service: DefensoriasService):
    with pytest.raises(ResourceNotFoundError):
        await service.registrar_responsable(
            "DNA-404",
            ResponsableCreate(txt_nombres="X", txt_apellidos="Y", fec_designacion=date(2024, 1, 1)),
        )


@pytest.mark.asyncio
async def test_estados_acreditacion(service: DefensoriasService):
    estados = await service.get_estados_acreditacion()
    assert [(e.clave_caracteristica, e.valor_caracteristica) for e in estados] == [
        ("a", "No Operativa"),
        ("b", "Acreditada"),
        ("c", "No Acreditada"),
    ]


@pytest.mark.asyncio
async def test_alta_de_responsable_en_repositorio(session_factory):
    async with session_factory() as session:
        persona = await DefensoriaRepository(session).add_responsable(
            "DNA-003",
            txt_nombres="Elena",
            txt_apellidos="Paredes",
            fec_designacion=date(2024, 9, 1),
        )

    assert isinstance(persona, DefensoriaPersona)
    assert persona.nid_persona is not None
    assert persona.codigo_funcion == FUNCION_RESPONSABLE
