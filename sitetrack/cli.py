"""
SiteTrack - Command Line Interface
Shows list views, project summaries, assignee heatmaps and dependency graphs
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional

import typer
from rich.console import Console

from sitetrack.core import Config, SiteTrackError
from sitetrack.dashboard import DashboardAggregator, DashboardFormatter, FilterCriteria
from sitetrack.integrations import SiteTrackClient

app = typer.Typer(help="SiteTrack - construction task and issue tracker")
console = Console()

_state = {"config_dir": None, "base_url": None}


def get_config() -> Config:
    return Config(_state["config_dir"])


def _run(action: Callable[[DashboardAggregator], Awaitable[Any]]) -> Any:
    """Run `action` against an aggregator bound to a fresh client."""
    config = get_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    async def main() -> Any:
        base_url = _state["base_url"] or config.api_base_url
        async with SiteTrackClient(base_url, timeout=config.request_timeout) as client:
            return await action(DashboardAggregator(client, config))

    try:
        return asyncio.run(main())
    except SiteTrackError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.callback()
def main(
    config_dir: Optional[Path] = typer.Option(None, "--config-dir", help="Configuration directory"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="API base URL (overrides settings)"),
):
    """SiteTrack command line."""
    _state["config_dir"] = config_dir
    _state["base_url"] = base_url


@app.command("list")
def list_items(
    tab: Optional[str] = typer.Argument(None, help="tasks or issues (default from preferences)"),
    query: Optional[str] = typer.Option(None, "--query", "-q", help="Search title, description, project, creator"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum number of items"),
    status: Optional[List[str]] = typer.Option(None, "--status", "-s", help="Only these statuses (repeatable)"),
    project: Optional[List[str]] = typer.Option(None, "--project", "-p", help="Only these projects (repeatable)"),
    creator: Optional[List[str]] = typer.Option(None, "--creator", help="Only items created by (repeatable)"),
    location: Optional[List[str]] = typer.Option(None, "--location", help="Only these locations (repeatable)"),
):
    """
    Show open tasks or issues ordered by urgency

    Critical issues come first, then overdue items (most overdue first),
    then by due date. Items without a due date are listed last.
    """
    if tab is not None and tab not in ("tasks", "issues"):
        console.print(f"[red]Unknown tab: {tab} (expected tasks or issues)[/red]")
        raise typer.Exit(2)

    criteria = FilterCriteria(
        statuses=list(status or []),
        projects=list(project or []),
        created_by=list(creator or []),
        locations=list(location or []),
    )
    view = _run(lambda aggregator: aggregator.list_view(tab, query, limit, criteria=criteria))
    DashboardFormatter(console).render_list_view(view)


@app.command()
def projects():
    """Show unresolved issues and incomplete tasks per project"""
    summaries = _run(lambda aggregator: aggregator.project_summaries())
    console.print(DashboardFormatter(console).format_project_summaries(summaries))


@app.command()
def assignees(
    user_id: Optional[str] = typer.Option(None, "--me", help="Your user id"),
    user_name: Optional[str] = typer.Option(None, "--name", help="Your display name"),
):
    """Show open issues per assignee"""
    rows = _run(lambda aggregator: aggregator.assignee_heatmap(user_id, user_name))
    console.print(DashboardFormatter(console).format_heatmap(rows))


@app.command()
def graph(project_id: str = typer.Argument(..., help="Project ID")):
    """Show the task dependency graph of a project"""
    result = _run(lambda aggregator: aggregator.dependency_graph(project_id))
    DashboardFormatter(console).render_graph(result)


if __name__ == "__main__":
    app()
