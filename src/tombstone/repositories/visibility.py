from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from sqlalchemy import and_
from sqlalchemy.orm import InstrumentedAttribute

from .types import Clock, FilterClause


def utc_now() -> datetime:
    return datetime.now(UTC)


class Visibility(StrEnum):
    ACTIVE = 'active'
    ONLY_DELETED = 'only_deleted'
    ALL = 'all'


def resolve_visibility(*, include_deleted: bool = False, only_deleted: bool = False) -> Visibility:
    if only_deleted:
        return Visibility.ONLY_DELETED
    if include_deleted:
        return Visibility.ALL
    return Visibility.ACTIVE


@dataclass(frozen=True, slots=True)
class VisibilityPolicy:
    """Maps a ``Visibility`` to the clause injected into every query.

    A row whose deletion marker equals ``now`` counts as deleted.
    """

    deleted_column: InstrumentedAttribute[Any]
    clock: Clock = utc_now

    def now(self) -> datetime:
        return self.clock()

    def clause(self, visibility: Visibility, *, now: datetime | None = None) -> FilterClause | None:
        match visibility:
            case Visibility.ONLY_DELETED:
                moment = self.now() if now is None else now
                return and_(self.deleted_column.is_not(None), self.deleted_column <= moment)
            case Visibility.ALL:
                return None
            case _:
                return self.deleted_column.is_(None)

    def for_flags(
        self,
        *,
        include_deleted: bool = False,
        only_deleted: bool = False,
        now: datetime | None = None,
    ) -> FilterClause | None:
        visibility = resolve_visibility(include_deleted=include_deleted, only_deleted=only_deleted)
        return self.clause(visibility, now=now)
