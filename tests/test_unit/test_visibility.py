import pytest
from sqlalchemy.sql import operators

from tombstone.repositories.visibility import Visibility, VisibilityPolicy, resolve_visibility

from tests.test_integration.mocks.model import FrozenClock, MockModel


@pytest.mark.parametrize(
    ('include_deleted', 'only_deleted', 'expected'),
    [
        (False, False, Visibility.ACTIVE),
        (True, False, Visibility.ALL),
        (False, True, Visibility.ONLY_DELETED),
        (True, True, Visibility.ONLY_DELETED),
    ],
)
def test_resolve_visibility(
    include_deleted: bool,
    only_deleted: bool,
    expected: Visibility,
) -> None:
    resolved = resolve_visibility(include_deleted=include_deleted, only_deleted=only_deleted)
    assert resolved is expected


def test_active_clause_selects_unset_marker() -> None:
    policy = VisibilityPolicy(MockModel.deleted_at, clock=FrozenClock())
    clause = policy.clause(Visibility.ACTIVE)
    assert clause is not None
    assert clause.compare(MockModel.deleted_at.is_(None))


def test_all_visibility_injects_nothing() -> None:
    policy = VisibilityPolicy(MockModel.deleted_at, clock=FrozenClock())
    assert policy.clause(Visibility.ALL) is None
    assert policy.for_flags(include_deleted=True) is None


def test_only_deleted_clause_is_inclusive_of_now() -> None:
    clock = FrozenClock()
    policy = VisibilityPolicy(MockModel.deleted_at, clock=clock)

    clause = policy.clause(Visibility.ONLY_DELETED)

    assert clause is not None
    assert clause.operator is operators.and_
    marker_set, not_later = clause.clauses
    assert marker_set.operator is operators.is_not
    assert not_later.operator is operators.le
    assert not_later.right.value == clock.now


def test_only_deleted_clause_uses_given_moment() -> None:
    clock = FrozenClock()
    policy = VisibilityPolicy(MockModel.deleted_at, clock=clock)
    moment = clock.now
    clock.advance(hours=1)

    clause = policy.for_flags(include_deleted=True, only_deleted=True, now=moment)

    assert clause is not None
    assert clause.clauses[1].right.value == moment
