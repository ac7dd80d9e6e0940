"""
Unit tests for the Rich dashboard formatter.
"""

import io
from datetime import date, datetime, timezone

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from rich.console import Console

from sitetrack.core.errors import MalformedRecord, SelfDependency
from sitetrack.core.models import DependencyEdge, DependencyGraph, ISSUE, ProjectSummary, WorkItem
from sitetrack.dashboard.aggregator import HeatmapRow, ListView
from sitetrack.dashboard.classifier import BadgeCounts
from sitetrack.dashboard.formatter import DashboardFormatter, format_due, format_progress

TODAY = date(2026, 10, 19)


def render(renderable):
    console = Console(file=io.StringIO(), width=120, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


class TestHelpers:
    """Tests for cell formatting helpers."""

    def test_format_progress_bands(self):
        assert "green" in format_progress(100)
        assert "yellow" in format_progress(50)
        assert "white" in format_progress(10)

    def test_format_due(self):
        assert "---" in format_due(WorkItem(), TODAY)
        assert "3 days ago" in format_due(WorkItem(due_date=datetime(2026, 10, 16)), TODAY)
        assert "1 day ago" in format_due(WorkItem(due_date=datetime(2026, 10, 18)), TODAY)
        assert "Due today" in format_due(WorkItem(due_date=datetime(2026, 10, 19, 18)), TODAY)
        assert "Due tmrw" in format_due(WorkItem(due_date=datetime(2026, 10, 20)), TODAY)
        assert "Nov 30" in format_due(WorkItem(due_date=datetime(2026, 11, 30)), TODAY)


class TestDashboardFormatter:
    """Tests for panel output."""

    def test_list_view(self):
        view = ListView(
            generated_at=datetime.now(timezone.utc),
            tab="issues",
            query=None,
            items=[WorkItem(id="1", kind=ISSUE, title="Seepage in basement", project_name="Tower A",
                            is_critical=True)],
            badges=BadgeCounts(unresolved_issues=1, incomplete_tasks=4),
        )
        output = render(DashboardFormatter().format_list_view(view, TODAY))
        assert "Issues (1)" in output
        assert "Tasks (4)" in output
        assert "Seepage in basement" in output
        assert "Tower A" in output

    def test_empty_list_view(self):
        view = ListView(datetime.now(timezone.utc), "tasks", None, [], BadgeCounts())
        assert "No open items" in render(DashboardFormatter().format_list_view(view))

    def test_render_list_view_reports_skipped(self):
        console = Console(file=io.StringIO(), width=120, color_system=None)
        view = ListView(datetime.now(timezone.utc), "tasks", None, [], BadgeCounts(),
                        errors=[MalformedRecord({})])
        DashboardFormatter(console).render_list_view(view)
        assert "1 records skipped" in console.file.getvalue()

    def test_project_summaries(self):
        summaries = [
            ProjectSummary(project_id="1", name="Tower A", unresolved_issue_count=3, incomplete_task_count=2),
            ProjectSummary(project_id="2", name=None, failed=True),
        ]
        output = render(DashboardFormatter().format_project_summaries(summaries))
        assert "Tower A" in output
        assert "5" in output
        assert "#2" in output
        assert "unavailable" in output

    def test_heatmap(self):
        rows = [HeatmapRow("1", "Ravi", 2), HeatmapRow("2", "User-2", 4)]
        output = render(DashboardFormatter().format_heatmap(rows))
        assert output.index("User-2") < output.index("Ravi")

    def test_empty_heatmap(self):
        assert "No open issues" in render(DashboardFormatter().format_heatmap([]))

    def test_render_graph_with_warnings(self):
        console = Console(file=io.StringIO(), width=120, color_system=None)
        graph = DependencyGraph(
            nodes=[WorkItem(id="1", title="Excavate"), WorkItem(id="2", title="Footings")],
            edges=[DependencyEdge("1", "2"), DependencyEdge("1", "9")],
            warnings=[SelfDependency("3")],
        )
        DashboardFormatter(console).render_graph(graph)
        output = console.file.getvalue()
        assert "Excavate" in output
        assert "Footings" in output
        assert "#9" in output
        assert "depends on itself" in output
        assert "fallback" in output
