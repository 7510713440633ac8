from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import Select, exists, func, select
from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.sql.base import ExecutableOption

from tombstone.persistence.models.base import GenericBaseModel

from ..types import (
    FilterClause,
    FilterSpec,
    OptionSpec,
    OrderSpec,
    SupportsOptions,
    SupportsWhere,
)


class ModelBoundMixin[ModelType: GenericBaseModel]:
    model: type[ModelType]

    def _resolve(self, spec: Any) -> Any:
        """Specs are either ready clauses or factories taking the model class."""
        return spec(self.model) if callable(spec) else spec


class LoadOptionsMixin[ModelType: GenericBaseModel](ModelBoundMixin[ModelType]):
    """Loader options, class-level defaults first."""

    default_options: Sequence[OptionSpec[ModelType]] = ()

    def merge_options(
        self,
        options: Iterable[OptionSpec[ModelType]] | None = None,
    ) -> tuple[ExecutableOption, ...]:
        return tuple(self._resolve(spec) for spec in (*self.default_options, *(options or ())))

    def apply_options[StatementT: SupportsOptions](
        self,
        statement: StatementT,
        options: Iterable[OptionSpec[ModelType]] | None = None,
    ) -> StatementT:
        merged = self.merge_options(options)
        return statement.options(*merged) if merged else statement


class FilterableMixin[ModelType: GenericBaseModel](ModelBoundMixin[ModelType]):
    """WHERE criteria, class-level defaults first; ``None`` entries are skipped."""

    default_filters: Sequence[FilterSpec[ModelType]] = ()

    def merge_filters(
        self,
        filters: Iterable[FilterSpec[ModelType] | None] | None = None,
    ) -> tuple[FilterClause, ...]:
        custom = (spec for spec in filters or () if spec is not None)
        return tuple(self._resolve(spec) for spec in (*self.default_filters, *custom))

    def apply_filters[StatementT: SupportsWhere](
        self,
        statement: StatementT,
        filters: Iterable[FilterSpec[ModelType] | None] | None = None,
    ) -> StatementT:
        clauses = self.merge_filters(filters)
        return statement.where(*clauses) if clauses else statement


class PrimaryKeyMixin[PKType, ModelType: GenericBaseModel](ModelBoundMixin[ModelType]):
    pk_attribute: str = 'id'

    @property
    def pk_column(self) -> InstrumentedAttribute[PKType]:
        return getattr(self.model, self.pk_attribute)

    def build_where_for_id(self, pk: PKType) -> FilterClause:
        return self.pk_column == pk


class OrderableMixin[PKType, ModelType: GenericBaseModel](PrimaryKeyMixin[PKType, ModelType]):
    """ORDER BY clauses; without any, rows come back by ascending primary key."""

    default_ordering: Sequence[OrderSpec[ModelType]] = ()

    def merge_ordering(
        self,
        ordering: Iterable[OrderSpec[ModelType]] | None = None,
    ) -> tuple[Any, ...]:
        resolved = tuple(
            self._resolve(spec) for spec in (*self.default_ordering, *(ordering or ()))
        )
        return resolved or (self.pk_column.asc(),)

    def apply_ordering(
        self,
        statement: Select[Any],
        ordering: Iterable[OrderSpec[ModelType]] | None = None,
    ) -> Select[Any]:
        return statement.order_by(*self.merge_ordering(ordering))


class ListableMixin[PKType, ModelType: GenericBaseModel](
    LoadOptionsMixin[ModelType],
    FilterableMixin[ModelType],
    OrderableMixin[PKType, ModelType],
):
    default_limit: int | None = None

    def list(
        self,
        *,
        filters: Iterable[FilterSpec[ModelType] | None] | None = None,
        limit: int | None = None,
        offset: int = 0,
        ordering: Iterable[OrderSpec[ModelType]] | None = None,
        options: Iterable[OptionSpec[ModelType]] | None = None,
    ) -> Select[tuple[ModelType]]:
        stmt = self.apply_options(select(self.model), options)
        stmt = self.apply_filters(stmt, filters)
        stmt = self.apply_ordering(stmt, ordering)
        limit_value = self.default_limit if limit is None else limit
        if limit_value is not None:
            stmt = stmt.limit(limit_value)
        return stmt.offset(offset) if offset else stmt

    def retrieve(
        self,
        pk: PKType,
        *,
        filters: Iterable[FilterSpec[ModelType] | None] | None = None,
        options: Iterable[OptionSpec[ModelType]] | None = None,
    ) -> Select[tuple[ModelType]]:
        return self.list(
            filters=(self.build_where_for_id(pk), *(filters or ())),
            limit=1,
            options=options,
        )


class ExistsMixin[PKType, ModelType: GenericBaseModel](PrimaryKeyMixin[PKType, ModelType]):
    def exists(self, pk: PKType) -> Select[tuple[bool]]:
        """Unfiltered: default filters do not apply to existence checks."""
        return select(exists().where(self.build_where_for_id(pk)))


class CountableMixin[ModelType: GenericBaseModel](FilterableMixin[ModelType]):
    def count(
        self,
        *,
        filters: Iterable[FilterSpec[ModelType] | None] | None = None,
    ) -> Select[tuple[int]]:
        return self.apply_filters(select(func.count()).select_from(self.model), filters)
