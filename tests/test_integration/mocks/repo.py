from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from tombstone.repositories.config import RepoConfig
from tombstone.repositories.crud import CrudRepository
from tombstone.repositories.query import Filter
from tombstone.repositories.soft_delete import SoftDeleteCrudRepository
from tombstone.repositories.types import Clock

from tests.test_integration.mocks.model import MockArchivedModel, MockModel


class MockRepo(CrudRepository[int, MockModel]):
    def __init__(self) -> None:
        super().__init__(MockModel)


class MockFlippingRepo(MockRepo):
    """Flips the lifecycle state of every row it reads, right after reading it."""

    def __init__(self, clock: Clock) -> None:
        super().__init__()
        self.clock = clock

    async def find_one(
        self,
        session: AsyncSession,
        filter: Filter | None = None,  # noqa: A002
    ) -> MockModel | None:
        entity = await super().find_one(session, filter)
        if entity is not None:
            marker = None if entity.deleted_at is not None else self.clock()
            await session.execute(
                update(MockModel)
                .where(MockModel.id == entity.id)
                .values(deleted_at=marker)
                .execution_options(synchronize_session=False),
            )
        return entity


class MockSoftDeleteRepo(SoftDeleteCrudRepository[int, MockModel]):
    def __init__(self, clock: Clock) -> None:
        super().__init__(MockRepo(), clock=clock)


class MockArchivedRepo(CrudRepository[int, MockArchivedModel]):
    def __init__(self) -> None:
        super().__init__(
            MockArchivedModel,
            config=RepoConfig(pk_attribute='uid', deleted_attribute='archived_at'),
        )
