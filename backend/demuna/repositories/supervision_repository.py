"""
Repository de Supervisiones.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import ColumnElement, select
from sqlalchemy.ext.asyncio import AsyncSession

from demuna.models.supervision import (
    Supervision,
    SupervisionFicha,
    SupervisionModalidad,
    SupervisionSeguimiento,
    Supervisor,
)
from demuna.repositories.base import BaseRepository


class SupervisionRepository(BaseRepository[Supervision]):
    """Repository para operaciones con Supervision."""

    def __init__(self, db: AsyncSession):
        super().__init__(Supervision, db)

    async def find_with_seguimiento(
        self,
        filters: Iterable[ColumnElement[bool]] = (),
        order_by: Sequence[Any] = (),
        skip: int = 0,
        limit: int | None = None,
    ) -> list[tuple[Supervision, SupervisionSeguimiento | None, SupervisionFicha | None]]:
        """
        Página de supervisiones con su seguimiento y ficha (1:1, opcionales).

        Los joins externos no alteran la cantidad de filas, así que el conteo
        sobre supervisiones con los mismos filtros coincide con la paginación.
        """
        query = (
            select(Supervision, SupervisionSeguimiento, SupervisionFicha)
            .outerjoin(
                SupervisionSeguimiento,
                SupervisionSeguimiento.nid_supervision == Supervision.nid_supervision,
            )
            .outerjoin(
                SupervisionFicha,
                SupervisionFicha.nid_supervision == Supervision.nid_supervision,
            )
            .where(*filters)
            .order_by(*order_by)
        )
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return [tuple(row) for row in result.all()]

    async def get_seguimiento(self, nid_supervision: int) -> SupervisionSeguimiento | None:
        return await self.db.get(SupervisionSeguimiento, nid_supervision)

    async def save_seguimiento(self, nid_supervision: int, **kwargs: Any) -> SupervisionSeguimiento:
        """Crea o actualiza el seguimiento de la supervisión."""
        seguimiento = await self.get_seguimiento(nid_supervision)
        if seguimiento is None:
            seguimiento = SupervisionSeguimiento(nid_supervision=nid_supervision)
            self.db.add(seguimiento)

        for key, value in kwargs.items():
            setattr(seguimiento, key, value)

        await self.db.commit()
        await self.db.refresh(seguimiento)
        return seguimiento

    async def supervisores_activos(self) -> list[Supervisor]:
        result = await self.db.execute(
            select(Supervisor)
            .where(Supervisor.flg_activo_dsld == True)  # noqa: E712
            .order_by(Supervisor.nombre_supervisor)
        )
        return list(result.scalars().all())

    async def modalidades(self) -> list[SupervisionModalidad]:
        result = await self.db.execute(
            select(SupervisionModalidad).order_by(SupervisionModalidad.nombre_modalidad)
        )
        return list(result.scalars().all())
