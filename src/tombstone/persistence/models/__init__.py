from .base import GenericBaseModel, SoftDeleteModelMixin, soft_delete_column
from .metadata import EntityMetadata

__all__ = [
    'EntityMetadata',
    'GenericBaseModel',
    'SoftDeleteModelMixin',
    'soft_delete_column',
]
