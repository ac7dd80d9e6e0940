"""
Unit tests for the classifier module.
Tests open/closed rules, search, badge counts, facets and list views.
"""

import pytest
from datetime import date, datetime

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from sitetrack.core.models import ISSUE, TASK, WorkItem
from sitetrack.core.normalizer import normalize
from sitetrack.dashboard.classifier import (
    FilterCriteria,
    apply_filters,
    badge_counts,
    build_list_view,
    display_filter,
    filter_options,
    is_incomplete_task,
    is_open,
    is_unresolved_issue,
    matches_query,
)

TODAY = date(2026, 10, 19)


class TestIsOpen:
    """Tests for the display open/closed rule."""

    @pytest.mark.parametrize("status", ["completed", "resolved"])
    def test_closed_issue_statuses(self, status):
        assert is_open(WorkItem(kind=ISSUE, status=status)) is False

    def test_issue_at_full_progress_is_closed(self):
        assert is_open(WorkItem(kind=ISSUE, status="open", progress_percent=100)) is False

    def test_open_issue(self):
        assert is_open(WorkItem(kind=ISSUE, status="pending_approval", progress_percent=60)) is True

    def test_resolved_task_is_still_open(self):
        assert is_open(WorkItem(kind=TASK, status="resolved")) is True

    def test_completed_or_full_task_closed(self):
        assert is_open(WorkItem(kind=TASK, status="completed")) is False
        assert is_open(WorkItem(kind=TASK, progress_percent=100)) is False

    def test_status_from_raw_is_case_insensitive(self):
        assert is_open(normalize({"status": "Completed"}, ISSUE)) is False

    def test_fractional_progress_below_100_stays_open(self):
        task = normalize({"id": "1", "progress": 99.6})
        assert is_open(task) is True
        assert is_incomplete_task(task) is True
        assert is_open(normalize({"id": "2", "progress": 99.6}, ISSUE)) is True

    def test_idempotent(self):
        item = WorkItem(kind=ISSUE, status="open")
        assert is_open(item) == is_open(item)


class TestDisplayFilter:
    """Tests for per-tab visibility."""

    def test_task_flagged_as_issue_hidden_from_tasks_tab(self):
        flagged = normalize({"id": 1, "isIssue": True})
        assert display_filter(flagged, "tasks") is False
        assert display_filter(flagged, "issues") is True

    def test_open_task_shown_in_tasks_tab(self):
        assert display_filter(WorkItem(id="1"), "tasks") is True

    def test_closed_item_hidden_everywhere(self):
        done = WorkItem(kind=ISSUE, status="resolved")
        assert display_filter(done, "issues") is False


class TestMatchesQuery:
    """Tests for free-text search."""

    def test_matches_any_field_case_insensitive(self):
        item = WorkItem(title="Fix wall", description="North side crack",
                        project_name="Tower A", creator_name="Asha")
        assert matches_query(item, "WALL")
        assert matches_query(item, "crack")
        assert matches_query(item, "tower")
        assert matches_query(item, "ash")

    def test_no_match(self):
        assert not matches_query(WorkItem(title="Fix wall"), "roof")

    def test_empty_query_matches(self):
        assert matches_query(WorkItem(), "")
        assert matches_query(WorkItem(), None)

    def test_missing_fields_are_empty(self):
        assert not matches_query(WorkItem(title=""), "x")


class TestBadgeCounts:
    """Tests for tab counter rules."""

    def test_unresolved_issue_ignores_progress(self):
        assert is_unresolved_issue(WorkItem(kind=ISSUE, progress_percent=100)) is True
        assert is_unresolved_issue(WorkItem(kind=ISSUE, status="resolved")) is False

    def test_incomplete_task(self):
        assert is_incomplete_task(WorkItem(progress_percent=99)) is True
        assert is_incomplete_task(WorkItem(progress_percent=100)) is False
        assert is_incomplete_task(WorkItem(status="completed")) is False

    def test_badge_counts(self):
        tasks = [WorkItem(progress_percent=10), WorkItem(progress_percent=100), WorkItem()]
        issues = [WorkItem(kind=ISSUE), WorkItem(kind=ISSUE, status="completed")]
        counts = badge_counts(tasks, issues)
        assert counts.incomplete_tasks == 2
        assert counts.unresolved_issues == 1


class TestFacets:
    """Tests for filter options and faceted filtering."""

    @pytest.fixture
    def issues(self):
        return [
            WorkItem(id="1", kind=ISSUE, title="Leak", status="open", project_name="Tower A",
                     creator_name="Asha", location="Pune"),
            WorkItem(id="2", kind=ISSUE, title="Crack", status="pending_approval",
                     project_name="Tower B", creator_name="Ravi"),
            WorkItem(id="3", kind=ISSUE, title="Leak again", status="open", project_name="Tower B",
                     creator_name="Asha", location="Mumbai"),
        ]

    def test_filter_options_sorted_and_distinct(self, issues):
        options = filter_options(issues)
        assert options.statuses == ["open", "pending_approval"]
        assert options.projects == ["Tower A", "Tower B"]
        assert options.creators == ["Asha", "Ravi"]
        assert options.locations == ["Mumbai", "Pune"]

    def test_facets_combine_with_and(self, issues):
        criteria = FilterCriteria(projects=["Tower B"], created_by=["Asha"])
        assert [i.id for i in apply_filters(issues, None, criteria)] == ["3"]
        assert criteria.active_count() == 2

    def test_query_and_status_facet(self, issues):
        criteria = FilterCriteria(statuses=["Open"])
        assert [i.id for i in apply_filters(issues, "leak", criteria)] == ["1", "3"]

    def test_no_criteria_keeps_everything(self, issues):
        assert apply_filters(issues) == issues


class TestBuildListView:
    """Tests for the combined tab view."""

    def test_tasks_tab(self):
        tasks = [
            WorkItem(id="late", title="Late", due_date=datetime(2026, 10, 16)),
            WorkItem(id="done", title="Done", progress_percent=100),
            WorkItem(id="soon", title="Soon", due_date=datetime(2026, 10, 20)),
            WorkItem(id="flag", kind=ISSUE, title="Flagged"),
            WorkItem(id="none", title="No date"),
        ]
        view = build_list_view(tasks, [], "tasks", today=TODAY)
        assert [i.id for i in view] == ["late", "soon", "none"]

    def test_issues_tab_with_query_and_limit(self):
        issues = [
            WorkItem(id="1", kind=ISSUE, title="Leak", due_date=datetime(2026, 10, 25)),
            WorkItem(id="2", kind=ISSUE, title="Leak", is_critical=True),
            WorkItem(id="3", kind=ISSUE, title="Crack"),
            WorkItem(id="4", kind=ISSUE, title="Leak", due_date=datetime(2026, 10, 10)),
        ]
        view = build_list_view([], issues, "issues", query="leak", limit=2, today=TODAY)
        assert [i.id for i in view] == ["2", "4"]

    def test_no_limit(self):
        issues = [WorkItem(id=str(n), kind=ISSUE) for n in range(30)]
        assert len(build_list_view([], issues, "issues", limit=None, today=TODAY)) == 30
        assert len(build_list_view([], issues, "issues", today=TODAY)) == 20

    def test_facets_applied_after_tab_filter(self):
        issues = [
            WorkItem(id="1", kind=ISSUE, project_name="Tower A", location="Pune"),
            WorkItem(id="2", kind=ISSUE, project_name="Tower B", location="Pune"),
            WorkItem(id="3", kind=ISSUE, project_name="Tower A", status="resolved"),
        ]
        criteria = FilterCriteria(projects=["Tower A"], locations=["Pune"])
        view = build_list_view([], issues, "issues", criteria=criteria, today=TODAY)
        assert [i.id for i in view] == ["1"]
