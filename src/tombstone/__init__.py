import logging

from tombstone.exceptions.common import NotFoundError, TombstoneError
from tombstone.persistence.models.base import (
    GenericBaseModel,
    SoftDeleteModelMixin,
    soft_delete_column,
)
from tombstone.repositories.config import RepoConfig
from tombstone.repositories.crud import CrudRepository, CrudRepositoryProtocol
from tombstone.repositories.factory import build_repository
from tombstone.repositories.query import Count, Filter, SoftDeleteFilter
from tombstone.repositories.soft_delete import SoftDeleteCrudRepository
from tombstone.repositories.visibility import Visibility, VisibilityPolicy

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'Count',
    'CrudRepository',
    'CrudRepositoryProtocol',
    'Filter',
    'GenericBaseModel',
    'NotFoundError',
    'RepoConfig',
    'SoftDeleteCrudRepository',
    'SoftDeleteFilter',
    'SoftDeleteModelMixin',
    'TombstoneError',
    'Visibility',
    'VisibilityPolicy',
    'build_repository',
    'soft_delete_column',
]
