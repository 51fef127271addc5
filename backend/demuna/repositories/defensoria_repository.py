"""
Repository de Defensorías y sus responsables.
"""

from collections.abc import Iterable
from typing import Any

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from demuna.models.defensoria import FUNCION_RESPONSABLE, Defensoria, DefensoriaPersona
from demuna.repositories.base import BaseRepository


class DefensoriaRepository(BaseRepository[Defensoria]):
    """Repository para operaciones con Defensoria."""

    def __init__(self, db: AsyncSession):
        super().__init__(Defensoria, db)

    async def responsables_de(self, codigos_dna: list[str]) -> list[DefensoriaPersona]:
        """Personas con función de responsable de las defensorías dadas."""
        if not codigos_dna:
            return []
        result = await self.db.execute(
            select(DefensoriaPersona)
            .where(
                DefensoriaPersona.codigo_dna.in_(codigos_dna),
                DefensoriaPersona.codigo_funcion == FUNCION_RESPONSABLE,
            )
            .order_by(DefensoriaPersona.fec_designacion.desc())
        )
        return list(result.scalars().all())

    async def add_responsable(self, codigo_dna: str, **kwargs: Any) -> DefensoriaPersona:
        """Registra una persona responsable."""
        return await BaseRepository(DefensoriaPersona, self.db).create(
            codigo_dna=codigo_dna,
            codigo_funcion=FUNCION_RESPONSABLE,
            **kwargs,
        )

    async def count_by(
        self,
        column: Any,
        filters: Iterable[ColumnElement[bool]] = (),
    ) -> dict[Any, int]:
        """Conteo agrupado por una columna o expresión."""
        result = await self.db.execute(
            select(column, func.count())
            .select_from(Defensoria)
            .where(*filters)
            .group_by(column)
        )
        return {row[0]: row[1] for row in result.all()}
