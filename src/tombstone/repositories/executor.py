from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel as PydanticModel
from sqlalchemy import Executable, Result
from sqlalchemy.ext.asyncio import AsyncSession

from tombstone.exceptions.common import NotFoundError
from tombstone.persistence.models.base import GenericBaseModel
from tombstone.persistence.models.metadata import EntityMetadata

type Payload[ModelType: GenericBaseModel] = Mapping[str, Any] | PydanticModel | ModelType


class SessionExecutorMixin[PKType, ModelType: GenericBaseModel]:
    metadata: EntityMetadata[PKType, ModelType]

    async def _execute(
        self,
        session: AsyncSession,
        statement: Executable,
        params: Sequence[Mapping[str, Any]] | None = None,
    ) -> Result[Any]:
        if params is None:
            return await session.execute(statement)
        return await session.execute(statement, params)

    async def execute_for_one(
        self,
        session: AsyncSession,
        statement: Executable,
        pk: PKType,
    ) -> ModelType:
        entity = await self.execute_optional(session, statement)
        if entity is None:
            raise NotFoundError[PKType](self.metadata.entity_name, pk)
        return entity

    async def execute_optional(
        self,
        session: AsyncSession,
        statement: Executable,
    ) -> ModelType | None:
        result = await self._execute(session, statement)
        return result.unique().scalars().first()

    async def execute_for_many(
        self,
        session: AsyncSession,
        statement: Executable,
        params: Sequence[Mapping[str, Any]] | None = None,
    ) -> list[ModelType]:
        result = await self._execute(session, statement, params)
        return list(result.unique().scalars().all())

    async def execute_for_rowcount(self, session: AsyncSession, statement: Executable) -> int:
        """Number of rows reported back through RETURNING."""
        result = await self._execute(session, statement)
        return len(result.all())

    async def execute_scalar(self, session: AsyncSession, statement: Executable) -> Any:
        result = await self._execute(session, statement)
        return result.scalar_one()


class PayloadMixin[PKType, ModelType: GenericBaseModel]:
    metadata: EntityMetadata[PKType, ModelType]

    def _dump_payload(
        self,
        data: Payload[ModelType],
        *,
        exclude_unset: bool,
    ) -> dict[str, Any]:
        if isinstance(data, Mapping):
            return dict(data)
        if isinstance(data, PydanticModel):
            return data.model_dump(exclude_unset=exclude_unset)
        return self.metadata.column_values(data, include_pk=True)

    def _replace_payload(self, data: Payload[ModelType]) -> dict[str, Any]:
        """Every non-key column, falling back to its default when absent."""
        given = self._dump_payload(data, exclude_unset=False)
        payload: dict[str, Any] = {}
        for key in self.metadata.column_keys:
            if key == self.metadata.pk_attribute:
                continue
            payload[key] = given[key] if key in given else self.metadata.column_default(key)
        return payload
