from collections.abc import Sequence
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from tombstone.exceptions.common import NotFoundError
from tombstone.persistence.models.base import GenericBaseModel
from tombstone.persistence.models.metadata import EntityMetadata

from .base import Repository
from .config import RepoConfig
from .executor import Payload, PayloadMixin, SessionExecutorMixin
from .query import Count, Filter
from .types import FilterClause


class CrudRepositoryProtocol[PKType, ModelType: GenericBaseModel](Protocol):
    """Storage operations a lifecycle-aware repository delegates to."""

    metadata: EntityMetadata[PKType, ModelType]

    def build_where_for_id(self, pk: PKType) -> FilterClause: ...

    async def create(self, session: AsyncSession, data: Payload[ModelType]) -> ModelType: ...

    async def create_all(
        self,
        session: AsyncSession,
        data: Sequence[Payload[ModelType]],
    ) -> list[ModelType]: ...

    async def find(
        self,
        session: AsyncSession,
        filter: Filter | None = None,
    ) -> list[ModelType]: ...

    async def find_one(
        self,
        session: AsyncSession,
        filter: Filter | None = None,
    ) -> ModelType | None: ...

    async def update(self, session: AsyncSession, entity: ModelType) -> None: ...

    async def update_by_id(
        self,
        session: AsyncSession,
        pk: PKType,
        data: Payload[ModelType],
        *,
        where: FilterClause | None = None,
    ) -> None: ...

    async def update_all(
        self,
        session: AsyncSession,
        data: Payload[ModelType],
        where: FilterClause | None = None,
    ) -> Count: ...

    async def replace_by_id(
        self,
        session: AsyncSession,
        pk: PKType,
        data: Payload[ModelType],
        *,
        where: FilterClause | None = None,
    ) -> None: ...

    async def delete_by_id(
        self,
        session: AsyncSession,
        pk: PKType,
        *,
        where: FilterClause | None = None,
    ) -> None: ...

    async def delete_all(
        self,
        session: AsyncSession,
        where: FilterClause | None = None,
    ) -> Count: ...

    async def count(self, session: AsyncSession, where: FilterClause | None = None) -> Count: ...

    async def exists(self, session: AsyncSession, pk: PKType) -> bool: ...


class CrudRepository[PKType, ModelType: GenericBaseModel](
    SessionExecutorMixin[PKType, ModelType],
    PayloadMixin[PKType, ModelType],
):
    """Plain async CRUD over a SQLAlchemy model.

    The session is owned by the caller: nothing here commits or rolls back.
    Errors raised by SQLAlchemy or the driver are not intercepted.
    """

    def __init__(
        self,
        model: type[ModelType],
        *,
        config: RepoConfig[ModelType] | None = None,
    ) -> None:
        config = config or RepoConfig()
        self.model = model
        self.config = config
        self.statements = Repository(model, config=config)
        self.metadata = EntityMetadata(
            model,
            pk_attribute=config.pk_attribute,
            deleted_attribute=config.deleted_attribute,
        )

    def build_where_for_id(self, pk: PKType) -> FilterClause:
        return self.statements.build_where_for_id(pk)

    def _update_payload(self, data: Payload[ModelType]) -> dict[str, Any]:
        payload = self._dump_payload(data, exclude_unset=True)
        payload.pop(self.metadata.pk_attribute, None)
        return payload

    async def create(self, session: AsyncSession, data: Payload[ModelType]) -> ModelType:
        payload = self._dump_payload(data, exclude_unset=False)
        query = self.statements.create(payload)
        return await self.execute_for_one(session, query, self.metadata.get_id(payload))

    async def create_all(
        self,
        session: AsyncSession,
        data: Sequence[Payload[ModelType]],
    ) -> list[ModelType]:
        if not data:
            return []
        payloads = [self._dump_payload(item, exclude_unset=False) for item in data]
        return await self.execute_for_many(session, self.statements.bulk_create(), payloads)

    async def find(
        self,
        session: AsyncSession,
        filter: Filter | None = None,  # noqa: A002
    ) -> list[ModelType]:
        filter = filter or Filter()  # noqa: A001
        query = self.statements.list(
            filters=(filter.where,),
            limit=filter.limit,
            offset=filter.offset,
            ordering=filter.order,
            options=filter.options,
        )
        return await self.execute_for_many(session, query)

    async def find_one(
        self,
        session: AsyncSession,
        filter: Filter | None = None,  # noqa: A002
    ) -> ModelType | None:
        filter = filter or Filter()  # noqa: A001
        query = self.statements.list(
            filters=(filter.where,),
            limit=1,
            offset=filter.offset,
            ordering=filter.order,
            options=filter.options,
        )
        return await self.execute_optional(session, query)

    async def update(self, session: AsyncSession, entity: ModelType) -> None:
        await self.update_by_id(session, self.metadata.get_id(entity), entity)

    async def update_by_id(
        self,
        session: AsyncSession,
        pk: PKType,
        data: Payload[ModelType],
        *,
        where: FilterClause | None = None,
    ) -> None:
        payload = self._update_payload(data)
        if not payload:
            # Nothing to write, still honour the not-found contract.
            query = self.statements.retrieve(pk, filters=(where,))
        else:
            query = self.statements.update(pk, payload, filters=(where,))
        await self.execute_for_one(session, query, pk)

    async def update_all(
        self,
        session: AsyncSession,
        data: Payload[ModelType],
        where: FilterClause | None = None,
    ) -> Count:
        payload = self._update_payload(data)
        if not payload:
            return await self.count(session, where)
        query = self.statements.update_by(payload, filters=(where,))
        return Count(await self.execute_for_rowcount(session, query))

    async def replace_by_id(
        self,
        session: AsyncSession,
        pk: PKType,
        data: Payload[ModelType],
        *,
        where: FilterClause | None = None,
    ) -> None:
        query = self.statements.update(pk, self._replace_payload(data), filters=(where,))
        await self.execute_for_one(session, query, pk)

    async def delete_by_id(
        self,
        session: AsyncSession,
        pk: PKType,
        *,
        where: FilterClause | None = None,
    ) -> None:
        deleted = await self.execute_for_rowcount(
            session,
            self.statements.delete(pk, filters=(where,)),
        )
        if not deleted:
            raise NotFoundError[PKType](self.metadata.entity_name, pk)

    async def delete_all(
        self,
        session: AsyncSession,
        where: FilterClause | None = None,
    ) -> Count:
        query = self.statements.delete_by(filters=(where,))
        return Count(await self.execute_for_rowcount(session, query))

    async def count(self, session: AsyncSession, where: FilterClause | None = None) -> Count:
        query = self.statements.count(filters=(where,))
        return Count(await self.execute_scalar(session, query))

    async def exists(self, session: AsyncSession, pk: PKType) -> bool:
        return bool(await self.execute_scalar(session, self.statements.exists(pk)))
