from collections.abc import Iterable
from typing import Any

from sqlalchemy import delete, insert, update
from sqlalchemy.sql.dml import ReturningInsert
from sqlalchemy.sql.selectable import TypedReturnsRows

from tombstone.persistence.models.base import GenericBaseModel

from ..types import FilterSpec, OptionSpec
from .query import FilterableMixin, LoadOptionsMixin, PrimaryKeyMixin

# Instances already loaded in the session pick up the new state.
SYNCHRONIZE_SESSION = 'fetch'


class CreatableMixin[ModelType: GenericBaseModel](LoadOptionsMixin[ModelType]):
    def create(
        self,
        payload: dict[str, Any],
        *,
        options: Iterable[OptionSpec[ModelType]] | None = None,
    ) -> ReturningInsert[tuple[ModelType]]:
        stmt = insert(self.model).values(**payload).returning(self.model)
        return self.apply_options(stmt, options)

    def bulk_create(
        self,
        *,
        options: Iterable[OptionSpec[ModelType]] | None = None,
    ) -> ReturningInsert[tuple[ModelType]]:
        """INSERT meant to be executed with a list of parameter dicts."""
        stmt = insert(self.model).returning(self.model, sort_by_parameter_order=True)
        return self.apply_options(stmt, options)


class UpdateMixin[PKType, ModelType: GenericBaseModel](
    LoadOptionsMixin[ModelType],
    FilterableMixin[ModelType],
    PrimaryKeyMixin[PKType, ModelType],
):
    def update_by(
        self,
        payload: dict[str, Any],
        *,
        filters: Iterable[FilterSpec[ModelType] | None] | None = None,
        options: Iterable[OptionSpec[ModelType]] | None = None,
    ) -> TypedReturnsRows[tuple[ModelType]]:
        stmt = update(self.model).values(**payload)
        stmt = self.apply_filters(stmt, filters)
        stmt = stmt.returning(self.model).execution_options(
            synchronize_session=SYNCHRONIZE_SESSION,
        )
        return self.apply_options(stmt, options)

    def update(
        self,
        pk: PKType,
        payload: dict[str, Any],
        *,
        filters: Iterable[FilterSpec[ModelType] | None] | None = None,
        options: Iterable[OptionSpec[ModelType]] | None = None,
    ) -> TypedReturnsRows[tuple[ModelType]]:
        filters = (self.build_where_for_id(pk), *(filters or ()))
        return self.update_by(payload, filters=filters, options=options)


class DeleteMixin[PKType, ModelType: GenericBaseModel](
    LoadOptionsMixin[ModelType],
    FilterableMixin[ModelType],
    PrimaryKeyMixin[PKType, ModelType],
):
    def delete_by(
        self,
        *,
        filters: Iterable[FilterSpec[ModelType] | None] | None = None,
    ) -> TypedReturnsRows[tuple[PKType]]:
        stmt = delete(self.model)
        stmt = self.apply_filters(stmt, filters)
        return stmt.returning(self.pk_column).execution_options(
            synchronize_session=SYNCHRONIZE_SESSION,
        )

    def delete(
        self,
        pk: PKType,
        *,
        filters: Iterable[FilterSpec[ModelType] | None] | None = None,
    ) -> TypedReturnsRows[tuple[PKType]]:
        filters = (self.build_where_for_id(pk), *(filters or ()))
        return self.delete_by(filters=filters)
