from tombstone.persistence.models.base import GenericBaseModel

from .config import RepoConfig
from .crud import CrudRepository
from .soft_delete import SoftDeleteCrudRepository
from .types import Clock
from .visibility import utc_now


def build_repository[PKType, ModelType: GenericBaseModel](
    model: type[ModelType],
    *,
    config: RepoConfig[ModelType] | None = None,
    soft_delete: bool = False,
    clock: Clock = utc_now,
) -> CrudRepository[PKType, ModelType] | SoftDeleteCrudRepository[PKType, ModelType]:
    """Create a repository with optional config overrides."""
    repo: CrudRepository[PKType, ModelType] = CrudRepository(model, config=config)
    if not soft_delete:
        return repo
    return SoftDeleteCrudRepository(repo, clock=clock)
