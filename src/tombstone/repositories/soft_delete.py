import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import replace
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.util import identity_key

from tombstone.exceptions.common import NotFoundError
from tombstone.persistence.models.base import GenericBaseModel
from tombstone.persistence.models.metadata import EntityMetadata

from .composer import apply_visibility, combine, lifecycle_flags
from .crud import CrudRepositoryProtocol
from .executor import Payload
from .query import Count, Filter
from .types import Clock, FilterClause
from .visibility import Visibility, VisibilityPolicy, utc_now

log = logging.getLogger(__name__)


class SoftDeleteCrudRepository[PKType, ModelType: GenericBaseModel]:
    """CRUD facade that hides soft-deleted rows unless asked otherwise.

    Lifecycle of a row, keyed by its identifier::

        ACTIVE --delete--> DELETED --restore--> ACTIVE
        DELETED --delete_hard--> removed

    ``delete`` on a deleted row, ``restore`` on an active row and ``delete_hard``
    on an active row all raise ``NotFoundError``. Bulk variants never raise for
    an empty match set, they report ``Count(0)``.

    Every storage call goes through ``repo``; the session is forwarded as-is so
    transaction boundaries stay with the caller.
    """

    def __init__(
        self,
        repo: CrudRepositoryProtocol[PKType, ModelType],
        *,
        clock: Clock = utc_now,
    ) -> None:
        self.repo = repo
        self.policy = VisibilityPolicy(repo.metadata.deleted_column, clock=clock)

    @property
    def metadata(self) -> EntityMetadata[PKType, ModelType]:
        return self.repo.metadata

    def _now(self) -> datetime:
        return self.policy.now()

    def _visible(self, visibility: Visibility, now: datetime) -> FilterClause | None:
        return self.policy.clause(visibility, now=now)

    def _apply_filter(self, filter: Filter | None, now: datetime) -> Filter:  # noqa: A002
        include_deleted, only_deleted = lifecycle_flags(filter)
        clause = self.policy.for_flags(
            include_deleted=include_deleted,
            only_deleted=only_deleted,
            now=now,
        )
        return apply_visibility(filter, clause)

    async def _locate(
        self,
        session: AsyncSession,
        pk: PKType,
        visible: FilterClause | None,
    ) -> ModelType:
        where = combine(visible, self.repo.build_where_for_id(pk))
        entity = await self.repo.find_one(session, Filter(where=where))
        if entity is None:
            raise NotFoundError[PKType](self.metadata.entity_name, pk)
        return entity

    async def _discard_pending(self, session: AsyncSession, pk: PKType) -> None:
        if pk is None:
            return
        entity = session.identity_map.get(identity_key(self.metadata.model, pk))
        if entity is not None and entity in session.dirty:
            await session.refresh(entity)

    async def _guarded_write(
        self,
        session: AsyncSession,
        pk: PKType,
        visibility: Visibility,
        now: datetime,
        write: Callable[[FilterClause | None], Awaitable[None]],
    ) -> None:
        """Locate ``pk`` under ``visibility``, then run ``write`` guarded by the same clause.

        Autoflush stays off meanwhile: unflushed changes on the target must not
        reach the row ahead of the check. On rejection they are dropped.
        """
        visible = self._visible(visibility, now)
        with session.no_autoflush:
            try:
                await self._locate(session, pk, visible)
                await write(visible)
            except NotFoundError:
                await self._discard_pending(session, pk)
                raise

    def _marker(self, value: datetime | None) -> dict[str, datetime | None]:
        return {self.metadata.deleted_attribute: value}

    async def create(self, session: AsyncSession, data: Payload[ModelType]) -> ModelType:
        return await self.repo.create(session, data)

    async def create_all(
        self,
        session: AsyncSession,
        data: Sequence[Payload[ModelType]],
    ) -> list[ModelType]:
        return await self.repo.create_all(session, data)

    async def save(self, session: AsyncSession, entity: ModelType) -> ModelType:
        pk = self.metadata.get_id(entity)
        if pk is None:
            return await self.create(session, entity)
        await self.replace_by_id(session, pk, entity)
        return entity

    async def find(
        self,
        session: AsyncSession,
        filter: Filter | None = None,  # noqa: A002
    ) -> list[ModelType]:
        return await self.repo.find(session, self._apply_filter(filter, self._now()))

    async def find_one(
        self,
        session: AsyncSession,
        filter: Filter | None = None,  # noqa: A002
    ) -> ModelType | None:
        return await self.repo.find_one(session, self._apply_filter(filter, self._now()))

    async def find_by_id(
        self,
        session: AsyncSession,
        pk: PKType,
        filter: Filter | None = None,  # noqa: A002
    ) -> ModelType:
        filter = filter or Filter()  # noqa: A001
        where = combine(self.repo.build_where_for_id(pk), filter.where)
        scoped = self._apply_filter(replace(filter, where=where), self._now())
        entity = await self.repo.find_one(session, scoped)
        if entity is None:
            raise NotFoundError[PKType](self.metadata.entity_name, pk)
        return entity

    async def update(self, session: AsyncSession, entity: ModelType) -> None:
        await self.update_by_id(session, self.metadata.get_id(entity), entity)

    async def update_by_id(
        self,
        session: AsyncSession,
        pk: PKType,
        data: Payload[ModelType],
    ) -> None:
        await self._guarded_write(
            session,
            pk,
            Visibility.ACTIVE,
            self._now(),
            lambda where: self.repo.update_by_id(session, pk, data, where=where),
        )

    async def replace_by_id(
        self,
        session: AsyncSession,
        pk: PKType,
        data: Payload[ModelType],
    ) -> None:
        await self._guarded_write(
            session,
            pk,
            Visibility.ACTIVE,
            self._now(),
            lambda where: self.repo.replace_by_id(session, pk, data, where=where),
        )

    async def update_all(
        self,
        session: AsyncSession,
        data: Payload[ModelType],
        where: FilterClause | None = None,
    ) -> Count:
        """Bulk update; soft-deleted rows are left untouched."""
        now = self._now()
        return await self.repo.update_all(
            session,
            data,
            combine(self._visible(Visibility.ACTIVE, now), where),
        )

    async def delete(self, session: AsyncSession, entity: ModelType) -> None:
        await self.delete_by_id(session, self.metadata.get_id(entity))

    async def delete_by_id(self, session: AsyncSession, pk: PKType) -> None:
        now = self._now()
        marker = self._marker(now)
        await self._guarded_write(
            session,
            pk,
            Visibility.ACTIVE,
            now,
            lambda where: self.repo.update_by_id(session, pk, marker, where=where),
        )
        log.debug('Soft-deleted %s with id %s', self.metadata.entity_name, pk)

    async def delete_all(
        self,
        session: AsyncSession,
        where: FilterClause | None = None,
    ) -> Count:
        now = self._now()
        result = await self.repo.update_all(
            session,
            self._marker(now),
            combine(self._visible(Visibility.ACTIVE, now), where),
        )
        log.debug('Soft-deleted %d %s rows', result.count, self.metadata.entity_name)
        return result

    async def restore(self, session: AsyncSession, entity: ModelType) -> None:
        await self.restore_by_id(session, self.metadata.get_id(entity))

    async def restore_by_id(self, session: AsyncSession, pk: PKType) -> None:
        marker = self._marker(self.metadata.deleted_default())
        await self._guarded_write(
            session,
            pk,
            Visibility.ONLY_DELETED,
            self._now(),
            lambda where: self.repo.update_by_id(session, pk, marker, where=where),
        )
        log.debug('Restored %s with id %s', self.metadata.entity_name, pk)

    async def restore_all(
        self,
        session: AsyncSession,
        where: FilterClause | None = None,
    ) -> Count:
        now = self._now()
        result = await self.repo.update_all(
            session,
            self._marker(self.metadata.deleted_default()),
            combine(self._visible(Visibility.ONLY_DELETED, now), where),
        )
        log.debug('Restored %d %s rows', result.count, self.metadata.entity_name)
        return result

    async def delete_hard(self, session: AsyncSession, entity: ModelType) -> None:
        await self.delete_hard_by_id(session, self.metadata.get_id(entity))

    async def delete_hard_by_id(self, session: AsyncSession, pk: PKType) -> None:
        """Permanently remove a row. Only rows already soft-deleted qualify."""
        await self._guarded_write(
            session,
            pk,
            Visibility.ONLY_DELETED,
            self._now(),
            lambda where: self.repo.delete_by_id(session, pk, where=where),
        )
        log.info('Hard-deleted %s with id %s', self.metadata.entity_name, pk)

    async def delete_hard_all(
        self,
        session: AsyncSession,
        where: FilterClause | None = None,
    ) -> Count:
        now = self._now()
        result = await self.repo.delete_all(
            session,
            combine(self._visible(Visibility.ONLY_DELETED, now), where),
        )
        log.info('Hard-deleted %d %s rows', result.count, self.metadata.entity_name)
        return result

    async def count(self, session: AsyncSession, where: FilterClause | None = None) -> Count:
        return await self._count(session, Visibility.ACTIVE, where)

    async def count_only_deleted(
        self,
        session: AsyncSession,
        where: FilterClause | None = None,
    ) -> Count:
        return await self._count(session, Visibility.ONLY_DELETED, where)

    async def count_with_deleted(
        self,
        session: AsyncSession,
        where: FilterClause | None = None,
    ) -> Count:
        return await self._count(session, Visibility.ALL, where)

    async def _count(
        self,
        session: AsyncSession,
        visibility: Visibility,
        where: FilterClause | None,
    ) -> Count:
        clause = self._visible(visibility, self._now())
        return await self.repo.count(session, combine(clause, where))

    async def exists(self, session: AsyncSession, pk: PKType) -> bool:
        """Whether a row with ``pk`` exists at all, deleted or not."""
        return await self.repo.exists(session, pk)
