from collections.abc import Sequence
from dataclasses import dataclass

from tombstone.persistence.models.base import GenericBaseModel

from .types import FilterSpec, OptionSpec, OrderSpec


@dataclass(frozen=True, slots=True)
class RepoConfig[ModelType: GenericBaseModel]:
    """Per-repository overrides for the class-level defaults."""

    default_limit: int | None = None
    pk_attribute: str = 'id'
    deleted_attribute: str = 'deleted_at'
    default_filters: Sequence[FilterSpec[ModelType]] = ()
    default_ordering: Sequence[OrderSpec[ModelType]] = ()
    default_options: Sequence[OptionSpec[ModelType]] = ()

    def __post_init__(self) -> None:
        if self.default_limit is not None and self.default_limit < 1:
            msg = 'default_limit must be a positive integer or None.'
            raise ValueError(msg)
