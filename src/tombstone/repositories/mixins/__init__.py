from .query import (
    CountableMixin,
    ExistsMixin,
    FilterableMixin,
    ListableMixin,
    LoadOptionsMixin,
    ModelBoundMixin,
    OrderableMixin,
    PrimaryKeyMixin,
)
from .write import (
    CreatableMixin,
    DeleteMixin,
    UpdateMixin,
)

__all__ = [
    'CountableMixin',
    'CreatableMixin',
    'DeleteMixin',
    'ExistsMixin',
    'FilterableMixin',
    'ListableMixin',
    'LoadOptionsMixin',
    'ModelBoundMixin',
    'OrderableMixin',
    'PrimaryKeyMixin',
    'UpdateMixin',
]
