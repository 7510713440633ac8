from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import InstrumentedAttribute, Mapper

from .base import GenericBaseModel


@dataclass(frozen=True, slots=True)
class EntityMetadata[PKType, ModelType: GenericBaseModel]:
    """Answers the questions repositories ask about a model class."""

    model: type[ModelType]
    pk_attribute: str = 'id'
    deleted_attribute: str = 'deleted_at'

    def __post_init__(self) -> None:
        columns = self.mapper.columns
        for attribute in (self.pk_attribute, self.deleted_attribute):
            if attribute not in columns:
                msg = f'{self.entity_name} has no column attribute {attribute!r}.'
                raise ValueError(msg)
        if self.deleted_default() is not None:
            msg = f'{self.entity_name}.{self.deleted_attribute} must default to None.'
            raise ValueError(msg)

    @property
    def mapper(self) -> Mapper[ModelType]:
        return inspect(self.model)

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    @property
    def pk_column(self) -> InstrumentedAttribute[PKType]:
        return getattr(self.model, self.pk_attribute)

    @property
    def deleted_column(self) -> InstrumentedAttribute[Any]:
        return getattr(self.model, self.deleted_attribute)

    @property
    def column_keys(self) -> tuple[str, ...]:
        return tuple(attr.key for attr in self.mapper.column_attrs)

    def get_id(self, entity: ModelType | Mapping[str, Any]) -> PKType | None:
        if isinstance(entity, Mapping):
            return entity.get(self.pk_attribute)
        return getattr(entity, self.pk_attribute, None)

    def column_default(self, key: str) -> Any:
        column = self.mapper.columns[key]
        default = column.default
        if default is not None and default.is_scalar:
            return default.arg
        return None

    def deleted_default(self) -> Any:
        """Value a restored row gets for its deletion marker."""
        return self.column_default(self.deleted_attribute)

    def column_values(self, entity: ModelType, *, include_pk: bool = False) -> dict[str, Any]:
        values = {key: getattr(entity, key) for key in self.column_keys}
        if not include_pk or values.get(self.pk_attribute) is None:
            values.pop(self.pk_attribute, None)
        return values
