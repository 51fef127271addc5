"""
Repository de Ubigeos.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from demuna.models.ubigeo import NivelUbigeo, Ubigeo
from demuna.repositories.base import BaseRepository


class UbigeoRepository(BaseRepository[Ubigeo]):
    """Repository para el catálogo de ubigeos."""

    def __init__(self, db: AsyncSession):
        super().__init__(Ubigeo, db)

    async def por_nivel(
        self,
        nivel: NivelUbigeo,
        codigo_padre: str | None = None,
    ) -> list[Ubigeo]:
        """Ubigeos de un nivel, opcionalmente hijos de codigo_padre, por nombre."""
        query = select(Ubigeo).where(Ubigeo.txt_nivel == nivel.value)
        if codigo_padre is not None:
            query = query.where(Ubigeo.codigo_padre == codigo_padre)
        result = await self.db.execute(query.order_by(Ubigeo.txt_nombre))
        return list(result.scalars().all())
