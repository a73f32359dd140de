"""
Unit tests for sibling ordering helpers.
"""

from datetime import datetime, timedelta, timezone

import pytest

from models.program import Week
from services.ordering import next_order, place, rank, resequence, sort_siblings

BASE = datetime(2024, 1, 15, tzinfo=timezone.utc)


def _week(week_id: str, order: int, minutes: int = 0) -> Week:
    return Week(
        id=week_id,
        program_id="p",
        name=week_id,
        order=order,
        created_at=BASE + timedelta(minutes=minutes),
    )


@pytest.mark.unit
class TestResequence:
    def test_fills_gaps(self):
        weeks = [_week("a", 1), _week("b", 3), _week("c", 7)]

        changed = resequence(weeks)

        assert [w.order for w in sort_siblings(weeks)] == [1, 2, 3]
        assert {w.id for w in changed} == {"b", "c"}

    def test_ties_broken_by_creation_time(self):
        older = _week("older", 2, minutes=0)
        newer = _week("newer", 2, minutes=5)

        resequence([newer, older])

        assert older.order == 1
        assert newer.order == 2

    def test_is_idempotent(self):
        weeks = [_week("a", 4), _week("b", 2), _week("c", 9)]
        resequence(weeks)

        assert resequence(weeks) == []

    def test_empty_list(self):
        assert resequence([]) == []


@pytest.mark.unit
class TestNextOrder:
    def test_no_siblings_starts_at_one(self):
        assert next_order([]) == 1

    def test_after_highest(self):
        assert next_order([_week("a", 1), _week("b", 5)]) == 6


@pytest.mark.unit
class TestPlace:
    def test_insert_new_node_in_the_middle(self):
        weeks = [_week("a", 1), _week("b", 2), _week("c", 3)]
        new = _week("new", 4, minutes=10)
        weeks.append(new)

        place(weeks, new, 2)

        assert [w.id for w in sort_siblings(weeks)] == ["a", "new", "b", "c"]
        assert [w.order for w in sort_siblings(weeks)] == [1, 2, 3, 4]

    def test_position_beyond_end_appends(self):
        weeks = [_week("a", 1), _week("b", 2)]
        new = _week("new", 3)
        weeks.append(new)

        changed = place(weeks, new, 99)

        assert new.order == 3
        assert changed == []

    def test_position_zero_clamps_to_first(self):
        weeks = [_week("a", 1), _week("b", 2)]
        new = _week("new", 3)
        weeks.append(new)

        place(weeks, new, 0)

        assert new.order == 1


@pytest.mark.unit
class TestRank:
    def test_ignores_gaps(self):
        weeks = [_week("b", 9), _week("a", 3)]

        assert rank(weeks, weeks[1]) == 1
        assert rank(weeks, weeks[0]) == 2
