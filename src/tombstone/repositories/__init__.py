from .base import Repository
from .composer import apply_visibility, combine, strip_lifecycle_flags
from .config import RepoConfig
from .crud import CrudRepository, CrudRepositoryProtocol
from .factory import build_repository
from .query import Count, Filter, SoftDeleteFilter
from .soft_delete import SoftDeleteCrudRepository
from .visibility import Visibility, VisibilityPolicy, resolve_visibility, utc_now

__all__ = [
    'Count',
    'CrudRepository',
    'CrudRepositoryProtocol',
    'Filter',
    'RepoConfig',
    'Repository',
    'SoftDeleteCrudRepository',
    'SoftDeleteFilter',
    'Visibility',
    'VisibilityPolicy',
    'apply_visibility',
    'build_repository',
    'combine',
    'resolve_visibility',
    'strip_lifecycle_flags',
    'utc_now',
]
