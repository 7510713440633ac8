"""Predicate composition for lifecycle-aware queries.

Visibility clauses are always AND-ed onto whatever the caller asked for, never
OR-ed, so a caller's constraint is never lost and visibility is never widened.
``None`` stands for "no restriction".
"""

from dataclasses import fields

from sqlalchemy import and_

from .query import Filter, SoftDeleteFilter
from .types import FilterClause

_FILTER_FIELDS = tuple(field.name for field in fields(Filter))


def combine(
    injected: FilterClause | None,
    existing: FilterClause | None = None,
) -> FilterClause | None:
    if injected is None:
        return existing
    if existing is None:
        return injected
    return and_(existing, injected)


def strip_lifecycle_flags(filter: Filter | None) -> Filter:  # noqa: A002
    """Plain ``Filter`` copy without ``include_deleted`` / ``only_deleted``."""
    if filter is None:
        return Filter()
    return Filter(**{name: getattr(filter, name) for name in _FILTER_FIELDS})


def apply_visibility(
    filter: Filter | None,  # noqa: A002
    clause: FilterClause | None,
) -> Filter:
    stripped = strip_lifecycle_flags(filter)
    return Filter(
        **{name: getattr(stripped, name) for name in _FILTER_FIELDS if name != 'where'},
        where=combine(clause, stripped.where),
    )


def lifecycle_flags(filter: Filter | None) -> tuple[bool, bool]:  # noqa: A002
    """``(include_deleted, only_deleted)`` carried by ``filter``."""
    if isinstance(filter, SoftDeleteFilter):
        return filter.include_deleted, filter.only_deleted
    return False, False
