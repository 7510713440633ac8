from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.sql.base import ExecutableOption

from .types import FilterClause, OrderClause


@dataclass(frozen=True, slots=True, kw_only=True)
class Filter:
    """Query shape understood by the plain CRUD repository."""

    where: FilterClause | None = None
    order: Sequence[OrderClause] = ()
    limit: int | None = None
    offset: int = 0
    options: Sequence[ExecutableOption] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class SoftDeleteFilter(Filter):
    """Filter carrying the two lifecycle flags.

    ``only_deleted`` wins when both flags are set.
    """

    include_deleted: bool = False
    only_deleted: bool = False


@dataclass(frozen=True, slots=True)
class Count:
    count: int
