import pytest
from sqlalchemy.sql import operators

from tombstone.repositories.composer import apply_visibility, combine, strip_lifecycle_flags
from tombstone.repositories.query import Filter, SoftDeleteFilter

from tests.test_integration.mocks.model import MockModel


def test_combine_without_existing_returns_injected_verbatim() -> None:
    injected = MockModel.deleted_at.is_(None)
    assert combine(injected) is injected
    assert combine(injected, None) is injected


def test_combine_without_injected_keeps_existing() -> None:
    existing = MockModel.title == 't1'
    assert combine(None, existing) is existing
    assert combine(None) is None


def test_combine_conjoins_existing_first() -> None:
    combined = combine(MockModel.deleted_at.is_(None), MockModel.title == 't1')
    assert combined is not None
    assert combined.operator is operators.and_
    assert str(combined) == 'mock_items.title = :title_1 AND mock_items.deleted_at IS NULL'


def test_combine_never_ors_visibility_in() -> None:
    existing = (MockModel.title == 't1') | (MockModel.title == 't2')
    combined = combine(MockModel.deleted_at.is_(None), existing)
    assert combined is not None
    assert str(combined) == (
        '(mock_items.title = :title_1 OR mock_items.title = :title_2) '
        'AND mock_items.deleted_at IS NULL'
    )


def test_strip_lifecycle_flags_returns_plain_filter() -> None:
    where = MockModel.title == 't1'
    order = (MockModel.title.desc(),)
    source = SoftDeleteFilter(where=where, order=order, limit=5, offset=2, only_deleted=True)

    stripped = strip_lifecycle_flags(source)

    assert type(stripped) is Filter
    assert stripped.where is where
    assert stripped.order == order
    assert (stripped.limit, stripped.offset) == (5, 2)
    assert not hasattr(stripped, 'only_deleted')
    assert source.only_deleted is True


def test_strip_lifecycle_flags_handles_missing_filter() -> None:
    assert strip_lifecycle_flags(None) == Filter()


@pytest.mark.parametrize('clause', [None, MockModel.deleted_at.is_(None)])
def test_apply_visibility_preserves_pagination(clause) -> None:
    source = SoftDeleteFilter(limit=3, offset=1, include_deleted=True)
    scoped = apply_visibility(source, clause)
    assert type(scoped) is Filter
    assert (scoped.limit, scoped.offset) == (3, 1)
    assert scoped.where is clause
