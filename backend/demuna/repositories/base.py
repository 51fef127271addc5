"""
Repository base con las operaciones genéricas sobre una tabla.

Equivale al cliente del backend de datos: filtrar, contar, paginar, ordenar
y consultar por lotes (IN) sobre un modelo.
"""

from collections.abc import Hashable, Iterable, Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from demuna.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Repository base.

    Uso:
        class DefensoriaRepository(BaseRepository[Defensoria]):
            def __init__(self, db: AsyncSession):
                super().__init__(Defensoria, db)
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    async def get_by_id(self, pk: Any) -> ModelType | None:
        """Busca la entidad por su clave primaria."""
        return await self.db.get(self.model, pk)

    async def count(self, filters: Iterable[ColumnElement[bool]] = ()) -> int:
        """Cuenta las filas que cumplen los filtros."""
        result = await self.db.execute(
            select(func.count()).select_from(self.model).where(*filters)
        )
        return result.scalar_one()

    async def find(
        self,
        filters: Iterable[ColumnElement[bool]] = (),
        order_by: Sequence[Any] = (),
        skip: int = 0,
        limit: int | None = None,
    ) -> list[ModelType]:
        """Lista las entidades filtradas, ordenadas y en el rango pedido."""
        query = select(self.model).where(*filters).order_by(*order_by)
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_in(
        self,
        column: Any,
        values: Iterable[Hashable],
        order_by: Sequence[Any] = (),
    ) -> list[ModelType]:
        """Consulta por lotes: filas cuyo valor de column está en values."""
        values = list(values)
        if not values:
            return []
        result = await self.db.execute(
            select(self.model).where(column.in_(values)).order_by(*order_by)
        )
        return list(result.scalars().all())

    async def lookup(
        self,
        key_column: Any,
        value_columns: Sequence[Any],
        keys: Iterable[Hashable],
    ) -> dict[Hashable, Any]:
        """
        Resuelve códigos a nombres en una sola consulta.

        Con una columna de valor retorna {clave: valor}; con varias,
        {clave: tupla}.
        """
        keys = list(keys)
        if not keys:
            return {}
        result = await self.db.execute(
            select(key_column, *value_columns).where(key_column.in_(keys))
        )
        if len(value_columns) == 1:
            return {row[0]: row[1] for row in result.all()}
        return {row[0]: tuple(row[1:]) for row in result.all()}

    async def create(self, **kwargs: Any) -> ModelType:
        """Crea una nueva entidad."""
        instance = self.model(**kwargs)
        self.db.add(instance)
        await self.db.commit()
        await self.db.refresh(instance)
        return instance
