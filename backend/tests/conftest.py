"""
Fixtures de pytest para las pruebas del dashboard SISDNA.

Cada prueba usa una base SQLite nueva (aiosqlite) con el esquema creado a
partir de los modelos y un juego de datos pequeño.
"""
from datetime import date
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from demuna.core.dependencies import (
    get_auth_service,
    get_current_user,
    get_lookup_cache,
    get_session_factory,
    get_ubigeos_service,
)
from demuna.core.security import get_password_hash
from demuna.db.base import Base
from demuna.main import app
from demuna.models import (
    Defensoria,
    DefensoriaCaracteristica,
    DefensoriaPersona,
    SeguimientoCierreTipo,
    SincronizacionEstado,
    Supervision,
    SupervisionFicha,
    SupervisionModalidad,
    SupervisionSeguimiento,
    Supervisor,
    Ubigeo,
)
from demuna.schemas.auth import SessionUser
from demuna.services.auth_service import AuthService
from demuna.services.lookup_cache import LookupCache
from demuna.services.ubigeo_service import UbigeosService

STAFF_EMAIL = "personal@mimp.gob.pe"
STAFF_PASSWORD = "clave-segura-123"


class QueryCounter:
    """Cuenta las sentencias enviadas a la base de datos."""

    def __init__(self) -> None:
        self.statements: list[str] = []

    def __call__(self, conn, cursor, statement, parameters, context, executemany) -> None:
        self.statements.append(statement)

    @property
    def count(self) -> int:
        return len(self.statements)

    def reset(self) -> None:
        self.statements.clear()


def _seed() -> list:
    ubigeos = [
        Ubigeo(codigo_ubigeo="150000", txt_nombre="Lima", txt_nivel="Departamento"),
        Ubigeo(codigo_ubigeo="150100", txt_nombre="Lima", txt_nivel="Provincia", codigo_padre="150000"),
        Ubigeo(codigo_ubigeo="150101", txt_nombre="Lima", txt_nivel="Distrito", codigo_padre="150100"),
        Ubigeo(codigo_ubigeo="150102", txt_nombre="Ancón", txt_nivel="Distrito", codigo_padre="150100"),
        Ubigeo(codigo_ubigeo="070000", txt_nombre="Callao", txt_nivel="Departamento"),
        Ubigeo(codigo_ubigeo="070100", txt_nombre="Callao", txt_nivel="Provincia", codigo_padre="070000"),
        Ubigeo(codigo_ubigeo="070101", txt_nombre="Callao", txt_nivel="Distrito", codigo_padre="070100"),
        Ubigeo(codigo_ubigeo="120000", txt_nombre="Junín", txt_nivel="Departamento"),
    ]
    caracteristicas = [
        DefensoriaCaracteristica(clave_caracteristica="a", valor_caracteristica="No Operativa"),
        DefensoriaCaracteristica(clave_caracteristica="b", valor_caracteristica="Acreditada"),
        DefensoriaCaracteristica(clave_caracteristica="c", valor_caracteristica="No Acreditada"),
        DefensoriaCaracteristica(clave_caracteristica="tp1", valor_caracteristica="Municipal Provincial"),
        DefensoriaCaracteristica(clave_caracteristica="tp2", valor_caracteristica="Municipal Distrital"),
    ]
    estados = [
        SincronizacionEstado(nid_estado="1", nombre_estado="ACTUALIZADA"),
        SincronizacionEstado(nid_estado="2", nombre_estado="NO ACTUALIZADA"),
        SincronizacionEstado(nid_estado="3", nombre_estado="FALTANTE"),
    ]
    defensorias = [
        Defensoria(
            codigo_dna="DNA-001",
            txt_nombre="DEMUNA Lima Cercado",
            txt_tipo="tp1",
            nid_ubigeo="150101",
            txt_direccion="Jr. Conde de Superunda 141",
            txt_telefono="014401234",
            txt_correo="demuna@munlima.gob.pe",
            nid_estado="b",
            nid_estado_sisdna="3",
            txt_campos_desactualizados="TXT_DIRECCION, TXT_TELEFONO",
        ),
        Defensoria(
            codigo_dna="DNA-002",
            txt_nombre="DEMUNA Ancón",
            txt_tipo="tp2",
            nid_ubigeo="150102",
            nid_estado="c",
            nid_estado_sisdna="1",
        ),
        Defensoria(
            codigo_dna="DNA-003",
            txt_nombre="DEMUNA Callao",
            txt_tipo="tp2",
            nid_ubigeo="070101",
            nid_estado="a",
        ),
    ]
    personas = [
        DefensoriaPersona(codigo_dna="DNA-001", codigo_funcion=1, txt_nombres="Rosa",
                          txt_apellidos="Quispe", fec_designacion=date(2023, 1, 1)),
        DefensoriaPersona(codigo_dna="DNA-001", codigo_funcion=1, txt_nombres="María",
                          txt_apellidos="Huamán", fec_designacion=date(2024, 6, 15)),
        DefensoriaPersona(codigo_dna="DNA-001", codigo_funcion=1, txt_nombres="Jorge",
                          txt_apellidos="Sin Fecha", fec_designacion=None),
        DefensoriaPersona(codigo_dna="DNA-001", codigo_funcion=2, txt_nombres="Luis",
                          txt_apellidos="Integrante", fec_designacion=date(2025, 1, 1)),
    ]
    supervisores = [
        Supervisor(codigo_supervisor=1, nombre_supervisor="Ana Torres", flg_activo_dsld=True),
        Supervisor(codigo_supervisor=2, nombre_supervisor="Bruno Díaz", flg_activo_dsld=True),
        Supervisor(codigo_supervisor=3, nombre_supervisor="Carla Ruiz", flg_activo_dsld=False),
    ]
    modalidades = [
        SupervisionModalidad(nid_modalidad=1, nombre_modalidad="Ordinaria"),
        SupervisionModalidad(nid_modalidad=2, nombre_modalidad="Extraordinaria"),
    ]
    supervisiones = [
        Supervision(nid_supervision=1, codigo_dna="DNA-001", fecha=date(2024, 3, 10),
                    codigo_supervisor=1, nid_modalidad=1, nid_estado_sisdna="1"),
        Supervision(nid_supervision=2, codigo_dna="DNA-002", fecha=date(2024, 5, 20),
                    codigo_supervisor=2, nid_modalidad=2, nid_estado_sisdna="3",
                    txt_campos_desactualizados="TXT_FECHA"),
        Supervision(nid_supervision=3, codigo_dna="DNA-003", fecha=date(2023, 11, 2),
                    codigo_supervisor=99, nid_modalidad=None),
        Supervision(nid_supervision=4, codigo_dna="DNA-999", fecha=date(2024, 1, 15),
                    codigo_supervisor=1, nid_modalidad=1),
    ]
    seguimiento = [
        SupervisionSeguimiento(
            nid_supervision=1,
            txt_informe_seguimiento="INF-001-2024",
            flg_subsanacion=True,
            fecha_cierre=date(2024, 4, 1),
            nid_modalidad_cierre="C1",
        ),
        SupervisionFicha(nid_supervision=1, url_file="https://archivos.mimp.gob.pe/fichas/1.pdf"),
        SeguimientoCierreTipo(cod_tipo_cierre="C1", txt_nombre="Subsanado"),
    ]
    return (
        ubigeos + caracteristicas + estados + defensorias + personas
        + supervisores + modalidades + supervisiones + seguimiento
    )


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Motor SQLite con el esquema y los datos de prueba."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'sisdna.db'}",
        echo=False,
        poolclass=NullPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSession(test_engine, expire_on_commit=False) as session:
        session.add_all(_seed())
        await session.commit()

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def queries(engine) -> Generator[QueryCounter, None, None]:
    """Contador de consultas enviadas al motor de prueba."""
    counter = QueryCounter()
    event.listen(engine.sync_engine, "before_cursor_execute", counter)
    yield counter
    event.remove(engine.sync_engine, "before_cursor_execute", counter)


@pytest.fixture
def cache() -> LookupCache:
    return LookupCache()


@pytest.fixture
def staff_user() -> SessionUser:
    return SessionUser(email=STAFF_EMAIL, name="Personal de Prueba")


def _override_dependencies(session_factory, cache) -> None:
    ubigeos_service = UbigeosService(session_factory, cache, timeout=2.0)
    auth_service = AuthService(
        staff_email=STAFF_EMAIL,
        staff_name="Personal de Prueba",
        staff_password_hash=get_password_hash(STAFF_PASSWORD),
    )
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_lookup_cache] = lambda: cache
    app.dependency_overrides[get_ubigeos_service] = lambda: ubigeos_service
    app.dependency_overrides[get_auth_service] = lambda: auth_service


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    cache: LookupCache,
    staff_user: SessionUser,
) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP con sesión del personal."""
    _override_dependencies(session_factory, cache)

    async def override_get_current_user():
        return staff_user

    app.dependency_overrides[get_current_user] = override_get_current_user

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def unauthenticated_client(
    session_factory: async_sessionmaker[AsyncSession],
    cache: LookupCache,
) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP sin sesión (valida la cookie real)."""
    _override_dependencies(session_factory, cache)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
