from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from tombstone.persistence.models.base import GenericBaseModel

from tests.test_integration.mocks.model import FrozenClock
from tests.test_integration.mocks.repo import MockArchivedRepo, MockRepo, MockSoftDeleteRepo


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine('sqlite+aiosqlite://', poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(GenericBaseModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def crud_repo() -> MockRepo:
    return MockRepo()


@pytest.fixture
def archived_repo() -> MockArchivedRepo:
    return MockArchivedRepo()


@pytest.fixture
def repo(clock: FrozenClock) -> MockSoftDeleteRepo:
    return MockSoftDeleteRepo(clock)
