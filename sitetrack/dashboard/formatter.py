"""
Rich formatter module for the SiteTrack dashboard.

Handles all Rich-based CLI formatting for list views, project summaries,
assignee heatmaps and dependency graphs.
"""

from datetime import date
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from sitetrack.core.models import DependencyGraph, ProjectSummary, WorkItem
from sitetrack.dashboard.aggregator import HeatmapRow, ListView
from sitetrack.dashboard.prioritizer import days_until_due


def format_progress(percent: int) -> str:
    """Format progress with a color by completion band."""
    if percent >= 100:
        return f"[green]{percent}%[/green]"
    if percent >= 50:
        return f"[yellow]{percent}%[/yellow]"
    return f"[white]{percent}%[/white]"


def format_due(item: WorkItem, today: Optional[date] = None) -> str:
    """Format due date with color based on urgency."""
    days = days_until_due(item, today)
    if days is None:
        return "[dim]---[/dim]"
    if days < 0:
        abs_days = abs(days)
        if abs_days == 1:
            return "[red bold]1 day ago[/red bold]"
        return f"[red bold]{abs_days} days ago[/red bold]"
    if days == 0:
        return "[yellow bold]Due today[/yellow bold]"
    if days == 1:
        return "[yellow]Due tmrw[/yellow]"
    if days <= 7:
        return f"[white]Due {item.due_date.strftime('%a')}[/white]"
    return f"[dim]{item.due_date.strftime('%b %d')}[/dim]"


def _truncate(text: str, width: int = 40) -> str:
    return text[:width] + "..." if len(text) > width else text


class DashboardFormatter:
    """
    Rich-based formatter for SiteTrack views.
    """

    def __init__(self, console: Optional[Console] = None):
        """
        Initialize formatter.

        Args:
            console: Rich Console instance (creates default if not provided)
        """
        self.console = console or Console()

    def format_list_view(self, view: ListView, today: Optional[date] = None) -> Panel:
        """
        Create panel listing the items under the active tab.

        Args:
            view: List view from DashboardAggregator.list_view
            today: Reference date for due-date labels

        Returns:
            Rich Panel with one row per item
        """
        title = (
            f"[bold]Issues ({view.badges.unresolved_issues})[/bold]  "
            f"[dim]Tasks ({view.badges.incomplete_tasks})[/dim]"
            if view.tab == "issues" else
            f"[dim]Issues ({view.badges.unresolved_issues})[/dim]  "
            f"[bold]Tasks ({view.badges.incomplete_tasks})[/bold]"
        )

        if not view.items:
            return Panel(
                Text("No open items", justify="center", style="dim"),
                title=title,
                border_style="blue",
                padding=(0, 1),
            )

        table = Table(show_header=True, header_style="bold cyan", box=box.SIMPLE, expand=True)
        table.add_column("", width=2)
        table.add_column("Title", ratio=1)
        table.add_column("Project", width=20)
        table.add_column("Progress", width=8, justify="right")
        table.add_column("Due", width=12, justify="right")

        for item in view.items:
            flag = "[red bold]![/red bold]" if item.is_critical else ""
            table.add_row(
                flag,
                _truncate(item.title),
                item.project_name or "[dim]-[/dim]",
                format_progress(item.progress_percent),
                format_due(item, today),
            )

        return Panel(table, title=title, border_style="blue", padding=(0, 1))

    def format_project_summaries(self, summaries: List[ProjectSummary]) -> Panel:
        """Create table panel of per-project open-work counts."""
        table = Table(show_header=True, header_style="bold cyan", box=box.SIMPLE, expand=True)
        table.add_column("Project", ratio=1)
        table.add_column("Ends", width=12)
        table.add_column("Issues", width=7, justify="right")
        table.add_column("Tasks", width=7, justify="right")
        table.add_column("Total", width=7, justify="right")

        for summary in summaries:
            name = summary.name or f"#{summary.project_id}"
            if summary.failed:
                name += " [red](unavailable)[/red]"
            table.add_row(
                name,
                summary.end_date.strftime("%Y-%m-%d") if summary.end_date else "[dim]---[/dim]",
                str(summary.unresolved_issue_count),
                str(summary.incomplete_task_count),
                f"[bold]{summary.total_count}[/bold]",
            )

        return Panel(table, title="[bold]Projects[/bold]", border_style="green", padding=(0, 1))

    def format_heatmap(self, rows: List[HeatmapRow]) -> Panel:
        """Create panel with a bar per assignee."""
        if not rows:
            return Panel(
                Text("No open issues", justify="center", style="dim"),
                title="[bold]Open Issues by Assignee[/bold]",
                border_style="magenta",
            )

        peak = max(row.count for row in rows)
        table = Table(show_header=False, box=None, padding=(0, 1), expand=True)
        table.add_column("User", width=20)
        table.add_column("Bar", ratio=1)
        table.add_column("Count", width=5, justify="right")

        for row in sorted(rows, key=lambda r: (-r.count, r.user_name)):
            bar = "█" * max(1, round(row.count / peak * 30))
            table.add_row(row.user_name, f"[magenta]{bar}[/magenta]", str(row.count))

        return Panel(table, title="[bold]Open Issues by Assignee[/bold]", border_style="magenta")

    def format_graph(self, graph: DependencyGraph) -> Panel:
        """Create panel listing dependency edges and data warnings."""
        titles = {node.id: node.title for node in graph.nodes}
        table = Table(show_header=True, header_style="bold cyan", box=box.SIMPLE, expand=True)
        table.add_column("Must finish first", ratio=1)
        table.add_column("", width=2)
        table.add_column("Before", ratio=1)

        for edge in graph.edges:
            table.add_row(
                titles.get(edge.from_id, f"#{edge.from_id}"),
                "→",
                titles.get(edge.to_id, f"#{edge.to_id}"),
            )

        subtitle = f"[dim]{len(graph.nodes)} tasks, {len(graph.edges)} dependencies ({graph.source})[/dim]"
        return Panel(table, title="[bold]Dependencies[/bold]", subtitle=subtitle, border_style="cyan")

    def format_warnings(self, warnings: List[object]) -> Optional[Panel]:
        if not warnings:
            return None
        text = Text()
        for warning in warnings:
            text.append(f"⚠ {warning}\n", style="yellow")
        return Panel(text, title="[yellow bold]Data warnings[/yellow bold]", border_style="yellow")

    def render_graph(self, graph: DependencyGraph) -> None:
        self.console.print(self.format_graph(graph))
        warning_panel = self.format_warnings(graph.warnings)
        if warning_panel:
            self.console.print(warning_panel)

    def render_list_view(self, view: ListView, today: Optional[date] = None) -> None:
        self.console.print(self.format_list_view(view, today))
        if view.errors:
            self.console.print(f"[dim]{len(view.errors)} records skipped (no id)[/dim]")
