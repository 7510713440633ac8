from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol, Self

from sqlalchemy.sql import ColumnElement
from sqlalchemy.sql.base import ExecutableOption
from sqlalchemy.sql.expression import UnaryExpression

from tombstone.persistence.models.base import GenericBaseModel

# A clause, or a callable building that clause from the mapped class.
type ModelFactory[ModelType: GenericBaseModel, T] = Callable[[type[ModelType]], T]

type FilterClause = ColumnElement[bool]
type FilterSpec[ModelType: GenericBaseModel] = FilterClause | ModelFactory[ModelType, FilterClause]

type OrderClause = ColumnElement[Any] | UnaryExpression[Any]
type OrderSpec[ModelType: GenericBaseModel] = OrderClause | ModelFactory[ModelType, OrderClause]

type OptionSpec[ModelType: GenericBaseModel] = (
    ExecutableOption | ModelFactory[ModelType, ExecutableOption]
)

type Clock = Callable[[], datetime]
"""Returns the current timezone-aware instant."""


class SupportsWhere(Protocol):
    def where(self, *criteria: Any) -> Self: ...


class SupportsOptions(Protocol):
    def options(self, *options: ExecutableOption) -> Self: ...
