from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Mapped, mapped_column

from tombstone.persistence.models.base import (
    GenericBaseModel,
    SoftDeleteModelMixin,
    soft_delete_column,
)


class MockModel(SoftDeleteModelMixin, GenericBaseModel):
    __tablename__ = 'mock_items'

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str]
    description: Mapped[str | None]


class MockArchivedModel(GenericBaseModel):
    __tablename__ = 'mock_archived'

    uid: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str]
    archived_at: Mapped[datetime | None] = soft_delete_column(comment='Archival time.')


@dataclass
class FrozenClock:
    now: datetime = field(default_factory=lambda: datetime(2026, 1, 1, 12, tzinfo=UTC))

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


class MockPresetMarkerModel(GenericBaseModel):
    __tablename__ = 'mock_preset_marker'

    id: Mapped[int] = mapped_column(primary_key=True)
    removed_at: Mapped[datetime | None] = soft_delete_column(
        default=datetime(2000, 1, 1, tzinfo=UTC),
    )
