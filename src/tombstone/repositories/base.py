from tombstone.persistence.models.base import GenericBaseModel

from .config import RepoConfig
from .mixins import (
    CountableMixin,
    CreatableMixin,
    DeleteMixin,
    ExistsMixin,
    ListableMixin,
    UpdateMixin,
)


class Repository[PKType, ModelType: GenericBaseModel](
    ListableMixin[PKType, ModelType],
    ExistsMixin[PKType, ModelType],
    CreatableMixin[ModelType],
    UpdateMixin[PKType, ModelType],
    DeleteMixin[PKType, ModelType],
    CountableMixin[ModelType],
):
    """Composition-friendly statement builder made out of mixins.

    Every method returns an executable statement; nothing touches a session.
    """

    def __init__(
        self,
        model: type[ModelType],
        *,
        config: RepoConfig[ModelType] | None = None,
    ) -> None:
        self.model = model
        if config is not None:
            self.default_limit = config.default_limit
            self.pk_attribute = config.pk_attribute
            self.default_filters = tuple(config.default_filters)
            self.default_ordering = tuple(config.default_ordering)
            self.default_options = tuple(config.default_options)
