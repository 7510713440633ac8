from datetime import datetime
from typing import Any

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, MappedColumn, declared_attr, mapped_column


class GenericBaseModel(DeclarativeBase):
    """Declarative base shared by every model handled by tombstone repositories."""


def soft_delete_column(
    *,
    comment: str = 'The date of deletion.',
    **kwargs: Any,
) -> MappedColumn[datetime | None]:
    """Declare a deletion marker column.

    The type (timezone-aware ``DateTime``) and nullability are fixed, everything
    else is up to the caller. ``NULL`` means the row is active, a timestamp means
    it was soft-deleted at that instant, so a scalar ``default`` other than
    ``None`` is rejected once a repository is built for the model.
    """
    kwargs.pop('nullable', None)
    return mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment=comment,
        **kwargs,
    )


class SoftDeleteModelMixin:
    """Adds a ``deleted_at`` deletion marker to a model."""

    @declared_attr
    def deleted_at(cls) -> Mapped[datetime | None]:  # noqa: N805
        return soft_delete_column()

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
