from copy import deepcopy
from typing import Any

from pydantic import BaseModel as PydanticModel
from pydantic import Field
from sqlalchemy import and_

from tombstone.persistence.models.base import GenericBaseModel
from tombstone.repositories.query import Filter, SoftDeleteFilter
from tombstone.repositories.types import FilterClause, OrderClause

from .base import BaseRequestSchema

LIFECYCLE_FLAG_PROPERTIES: dict[str, dict[str, Any]] = {
    'withDeleted': {'type': 'boolean'},
    'onlyDeleted': {'type': 'boolean'},
}


def _column(model: type[GenericBaseModel], name: str) -> Any:
    column = getattr(model, name, None)
    if column is None or not hasattr(column, 'expression'):
        msg = f'{model.__name__} has no column {name!r}.'
        raise ValueError(msg)
    return column


class FilterSchema(BaseRequestSchema):
    """Wire shape of a query filter as exposed to API clients.

    ``where`` maps column names to a value (equality) or a list of values
    (membership); ``order`` items look like ``"title"`` or ``"title DESC"``.
    """

    where: dict[str, Any] | None = None
    order: list[str] | None = None
    limit: int | None = Field(default=None, ge=1)
    skip: int = Field(default=0, ge=0)

    def where_clause(self, model: type[GenericBaseModel]) -> FilterClause | None:
        if not self.where:
            return None
        clauses = []
        for name, value in self.where.items():
            column = _column(model, name)
            if isinstance(value, list):
                clauses.append(column.in_(value))
            elif value is None:
                clauses.append(column.is_(None))
            else:
                clauses.append(column == value)
        return and_(*clauses)

    def order_clauses(self, model: type[GenericBaseModel]) -> tuple[OrderClause, ...]:
        clauses = []
        for item in self.order or ():
            name, _, direction = item.strip().partition(' ')
            column = _column(model, name)
            match direction.strip().upper():
                case '' | 'ASC':
                    clauses.append(column.asc())
                case 'DESC':
                    clauses.append(column.desc())
                case _:
                    msg = f'Unknown sort direction in {item!r}.'
                    raise ValueError(msg)
        return tuple(clauses)

    def to_filter(self, model: type[GenericBaseModel]) -> Filter:
        return Filter(
            where=self.where_clause(model),
            order=self.order_clauses(model),
            limit=self.limit,
            offset=self.skip,
        )


class SoftDeleteFilterSchema(FilterSchema):
    include_deleted: bool = Field(default=False, alias='withDeleted')
    only_deleted: bool = Field(default=False, alias='onlyDeleted')

    def to_filter(self, model: type[GenericBaseModel]) -> SoftDeleteFilter:
        return SoftDeleteFilter(
            where=self.where_clause(model),
            order=self.order_clauses(model),
            limit=self.limit,
            offset=self.skip,
            include_deleted=self.include_deleted,
            only_deleted=self.only_deleted,
        )


def get_soft_delete_filter_schema_for(
    filter_schema: type[PydanticModel] | dict[str, Any],
) -> dict[str, Any]:
    """Add the optional ``withDeleted`` / ``onlyDeleted`` booleans to a filter JSON schema.

    Documentation only: queries are not affected by what this returns.
    """
    if isinstance(filter_schema, dict):
        schema = deepcopy(filter_schema)
    else:
        schema = filter_schema.model_json_schema(by_alias=True)
    schema['properties'] = {**schema.get('properties', {}), **deepcopy(LIFECYCLE_FLAG_PROPERTIES)}
    return schema
