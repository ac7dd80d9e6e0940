"""
Unit tests for the prioritizer module.
Tests urgency ordering of tasks and issues.
"""

import time

import pytest
from datetime import date, datetime, timedelta, timezone

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from sitetrack.core.models import ISSUE, WorkItem
from sitetrack.dashboard.prioritizer import (
    compare_urgency,
    days_until_due,
    sort_by_urgency,
)

TODAY = date(2026, 10, 19)


def due(days, hour=0):
    day = TODAY + timedelta(days=days)
    return datetime(day.year, day.month, day.day, hour)


def item(item_id, days=None, critical=False, kind="task"):
    return WorkItem(
        id=item_id,
        kind=kind,
        title=item_id,
        due_date=due(days) if days is not None else None,
        is_critical=critical,
    )


class TestDaysUntilDue:
    """Tests for the day difference calculation."""

    def test_ignores_time_of_day(self):
        late_today = WorkItem(id="a", due_date=due(0, hour=23))
        assert days_until_due(late_today, TODAY) == 0

    def test_overdue_is_negative(self):
        assert days_until_due(item("a", -3), TODAY) == -3

    def test_no_due_date(self):
        assert days_until_due(item("a"), TODAY) is None

    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
    def test_aware_due_date_uses_local_calendar_day(self, monkeypatch):
        monkeypatch.setenv("TZ", "EST5EDT,M3.2.0,M11.1.0")
        time.tzset()
        try:
            late_evening = WorkItem(id="a", due_date=datetime(2026, 10, 20, 2, tzinfo=timezone.utc))
            assert days_until_due(late_evening, TODAY) == 0

            previous_night = WorkItem(id="b", due_date=datetime(2026, 10, 19, 3, tzinfo=timezone.utc))
            assert days_until_due(previous_night, TODAY) == -1
        finally:
            monkeypatch.undo()
            time.tzset()

    def test_naive_due_date_taken_as_is(self):
        assert days_until_due(WorkItem(id="a", due_date=datetime(2026, 10, 20, 2)), TODAY) == 1


class TestSortByUrgency:
    """Tests for urgency ordering."""

    def test_overdue_then_due_soon_then_no_date(self):
        overdue, soon, undated = item("overdue", -3), item("soon", 1), item("undated")
        ordered = sort_by_urgency([undated, soon, overdue], "tasks", TODAY)
        assert ordered == [overdue, soon, undated]

    def test_critical_issue_beats_overdue_issue(self):
        critical = item("critical", 10, critical=True, kind=ISSUE)
        overdue = item("overdue", -1, kind=ISSUE)
        assert sort_by_urgency([overdue, critical], "issues", TODAY) == [critical, overdue]

    def test_critical_ignored_in_tasks_mode(self):
        critical = item("critical", 10, critical=True)
        overdue = item("overdue", -1)
        assert sort_by_urgency([critical, overdue], "tasks", TODAY) == [overdue, critical]

    def test_more_overdue_first(self):
        a, b = item("a", -1), item("b", -7)
        assert sort_by_urgency([a, b], "tasks", TODAY) == [b, a]

    def test_sooner_due_first(self):
        a, b = item("a", 5), item("b", 0)
        assert sort_by_urgency([a, b], "tasks", TODAY) == [b, a]

    def test_stable_for_equal_items(self):
        items = [item("x"), item("y"), item("z")]
        assert sort_by_urgency(items, "tasks", TODAY) == items

        same_day = [item("p", 2), item("q", 2)]
        assert sort_by_urgency(same_day, "tasks", TODAY) == same_day

    def test_sorting_is_idempotent(self):
        items = [
            item("a", 3), item("b"), item("c", -2, critical=True, kind=ISSUE),
            item("d", -5, kind=ISSUE), item("e", 0, critical=True, kind=ISSUE), item("f"),
        ]
        once = sort_by_urgency(items, "issues", TODAY)
        assert sort_by_urgency(once, "issues", TODAY) == once

    def test_returns_new_list(self):
        items = [item("b", 2), item("a", 1)]
        sort_by_urgency(items, "tasks", TODAY)
        assert [i.id for i in items] == ["b", "a"]


class TestCompareUrgency:
    """Comparator consistency."""

    @pytest.mark.parametrize("mode", ["tasks", "issues"])
    def test_antisymmetric(self, mode):
        pool = [
            item("a", -4), item("b", -1, critical=True), item("c", 0),
            item("d", 6, critical=True), item("e"), item("f", critical=True),
        ]
        for a in pool:
            for b in pool:
                assert compare_urgency(a, b, mode, TODAY) == -compare_urgency(b, a, mode, TODAY)

    def test_transitive(self):
        pool = [item("a", -4), item("b", -1), item("c", 0), item("d", 6), item("e")]
        for a in pool:
            for b in pool:
                for c in pool:
                    if compare_urgency(a, b, "tasks", TODAY) < 0 and compare_urgency(b, c, "tasks", TODAY) < 0:
                        assert compare_urgency(a, c, "tasks", TODAY) < 0
