"""
Data aggregation module for the SiteTrack dashboard.

Rolls normalized work items up into per-project and per-assignee counts,
and assembles the list views shown on the home screen. Per-project details
are fetched concurrently; a project whose details cannot be fetched
contributes a zeroed summary instead of failing the whole dashboard.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

from sitetrack.core.config import Config
from sitetrack.core.errors import MalformedRecord
from sitetrack.core.models import (
    ISSUE,
    TASK,
    UNASSIGNED,
    AggregationBucket,
    DependencyGraph,
    NormalizationReport,
    ProjectSummary,
    SubCounts,
    WorkItem,
)
from sitetrack.core.normalizer import as_id, first_present, normalize, normalize_many, parse_date
from sitetrack.dashboard.classifier import (
    BadgeCounts,
    FilterCriteria,
    FilterOptions,
    badge_counts,
    build_list_view,
    display_filter,
    filter_options,
)
from sitetrack.dashboard.dependency_graph import build_dependency_graph

logger = logging.getLogger(__name__)

RESOLVED_STATUSES = frozenset({"resolved", "closed", "done", "completed"})

DetailsFetcher = Callable[[str], Awaitable[Dict[str, Any]]]

PROJECT_KEY_ACCESSORS = (
    lambda p: p.get("id"),
    lambda p: p.get("_id"),
    lambda p: p.get("projectId"),
)


@dataclass
class HeatmapRow:
    """Open-issue count for one assignee."""
    user_id: str
    user_name: str
    count: int


@dataclass
class ListView:
    """Items shown under a tab plus the counters for both tabs."""
    generated_at: datetime
    tab: str
    query: Optional[str]
    items: List[WorkItem]
    badges: BadgeCounts
    errors: List[MalformedRecord] = field(default_factory=list)
    options: FilterOptions = field(default_factory=FilterOptions)


def is_unresolved(item: WorkItem) -> bool:
    """Dashboard rule: no status, or a status outside the resolved set."""
    return not item.status or item.status not in RESOLVED_STATUSES


def _project_tasks(details: Dict[str, Any]) -> List[Any]:
    tasks: List[Any] = []
    for worklist in details.get("worklists") or []:
        if isinstance(worklist, dict) and isinstance(worklist.get("tasks"), list):
            tasks.extend(worklist["tasks"])
    return tasks


def count_open_work(details: Dict[str, Any]) -> Tuple[int, int]:
    """
    Count unresolved issues and incomplete tasks in a project's details.

    Returns:
        Tuple of (unresolved_issue_count, incomplete_task_count)
    """
    if not isinstance(details, dict):
        raise TypeError(f"Project details must be an object, got {type(details).__name__}")

    issues = [normalize(raw, ISSUE) for raw in details.get("issues") or []]
    tasks = [normalize(raw, TASK) for raw in _project_tasks(details)]
    unresolved = sum(1 for issue in issues if is_unresolved(issue))
    incomplete = sum(1 for task in tasks if task.progress_percent < 100)
    return unresolved, incomplete


async def aggregate_by_project(
    projects: Iterable[Dict[str, Any]],
    details_fetcher: DetailsFetcher,
) -> List[ProjectSummary]:
    """
    Summarize open work for every project, fetching details concurrently.

    Args:
        projects: Raw project records (`id`, `projectName`, `endDate`, ...)
        details_fetcher: Coroutine function returning a project's details

    Returns:
        One ProjectSummary per input project, in input order
    """
    async def summarize(project: Any) -> ProjectSummary:
        if not isinstance(project, dict):
            project = {}
        project_id = as_id(first_present(project, PROJECT_KEY_ACCESSORS))
        summary = ProjectSummary(
            project_id=project_id,
            name=project.get("projectName") or project.get("name"),
            end_date=parse_date(project.get("endDate")),
        )
        try:
            details = await details_fetcher(project_id)
            unresolved, incomplete = count_open_work(details)
        except Exception as e:
            logger.warning("Could not load details for project %s: %s", project_id, e)
            summary.failed = True
            return summary

        summary.unresolved_issue_count = unresolved
        summary.incomplete_task_count = incomplete
        return summary

    return list(await asyncio.gather(*(summarize(p) for p in projects)))


def aggregate_by_assignee(items: Iterable[WorkItem]) -> Dict[str, int]:
    """
    Count items per assignee id.

    An item with several assignees counts once for each of them; an item
    with none counts under "unassigned".
    """
    counts: Dict[str, int] = {}
    for item in items:
        for user_id in item.assigned_user_ids or (UNASSIGNED,):
            counts[user_id] = counts.get(user_id, 0) + 1
    return counts


def assignee_buckets(items: Iterable[WorkItem]) -> List[AggregationBucket]:
    """Per-assignee buckets with issue/task sub-counts, largest first."""
    buckets: Dict[str, AggregationBucket] = {}
    for item in items:
        for user_id in item.assigned_user_ids or (UNASSIGNED,):
            bucket = buckets.setdefault(user_id, AggregationBucket(key=user_id, sub_counts=SubCounts()))
            bucket.count += 1
            if item.is_issue:
                bucket.sub_counts.issues += 1
            else:
                bucket.sub_counts.tasks += 1
    return sorted(buckets.values(), key=lambda b: (-b.count, b.key))


def issue_heatmap(
    assigned_issues: Iterable[Dict[str, Any]],
    created_issues: Iterable[Dict[str, Any]],
    current_user_id: Optional[str] = None,
    current_user_name: Optional[str] = None,
) -> List[HeatmapRow]:
    """
    Open issues per assignee across the issues assigned to and created by
    the current user.

    Display names come from `assignToUserName` on created issues, then the
    current user's own name, else "User-<id>".
    """
    assigned_issues = list(assigned_issues or [])
    created_issues = list(created_issues or [])

    names: Dict[str, str] = {}
    for raw in created_issues:
        if not isinstance(raw, dict):
            continue
        user_id = as_id(raw.get("assignToUserId"))
        if user_id and raw.get("assignToUserName"):
            names[user_id] = str(raw["assignToUserName"])
    if current_user_id and current_user_name:
        names[str(current_user_id)] = current_user_name

    report = normalize_many(created_issues + assigned_issues, ISSUE)
    open_issues = [issue for issue in report.items if is_unresolved(issue)]
    counts = aggregate_by_assignee(open_issues)

    rows = []
    for user_id, count in counts.items():
        if count <= 0:
            continue
        if user_id == UNASSIGNED:
            name = "Unassigned"
        else:
            name = names.get(user_id, f"User-{user_id}")
        rows.append(HeatmapRow(user_id=user_id, user_name=name, count=count))
    return rows


class DashboardAggregator:
    """
    Central data aggregation for the dashboard and list views.

    Fetches raw records through the API client and runs them through the
    normalizer, classifier, sort and aggregation steps.
    """

    def __init__(self, client: Any, config: Optional[Config] = None):
        """
        Initialize aggregator.

        Args:
            client: SiteTrackClient (or any object with the same fetch methods)
            config: Configuration (creates default if not provided)
        """
        self.client = client
        self.config = config if config else Config()

    async def load_work_items(self) -> Tuple[NormalizationReport, NormalizationReport]:
        """Fetch and normalize the current user's tasks and assigned issues."""
        raw_tasks, raw_issues = await asyncio.gather(
            self.client.fetch_my_tasks(),
            self.client.fetch_assigned_issues(),
        )
        return normalize_many(raw_tasks, TASK), normalize_many(raw_issues, ISSUE)

    async def list_view(
        self,
        tab: Optional[str] = None,
        query: Optional[str] = None,
        limit: Optional[int] = None,
        today: Optional[date] = None,
        criteria: Optional[FilterCriteria] = None,
    ) -> ListView:
        """
        Build the list shown under a tab.

        Args:
            tab: 'tasks' or 'issues' (defaults to the configured default tab)
            query: Search text, already debounced by the caller
            limit: Maximum items (defaults to the configured list limit)
            today: Reference date for urgency
            criteria: Facet selections applied after the tab filter
        """
        tab = tab or self.config.default_tab
        if limit is None:
            limit = self.config.list_view_limit

        tasks, issues = await self.load_work_items()
        items = build_list_view(tasks.items, issues.items, tab, query, limit, today, criteria)
        source = tasks.items if tab == "tasks" else issues.items

        return ListView(
            generated_at=datetime.now(timezone.utc),
            tab=tab,
            query=query,
            items=items,
            badges=badge_counts(tasks.items, issues.items),
            errors=tasks.errors + issues.errors,
            options=filter_options(item for item in source if display_filter(item, tab)),
        )

    async def project_summaries(self) -> List[ProjectSummary]:
        projects = await self.client.fetch_projects()
        return await aggregate_by_project(projects, self.client.fetch_project)

    async def assignee_heatmap(
        self,
        current_user_id: Optional[str] = None,
        current_user_name: Optional[str] = None,
    ) -> List[HeatmapRow]:
        assigned, created = await asyncio.gather(
            self.client.fetch_assigned_issues(),
            self.client.fetch_created_issues(),
        )
        return issue_heatmap(assigned, created, current_user_id, current_user_name)

    async def dependency_graph(self, project_id: str) -> DependencyGraph:
        return await build_dependency_graph(project_id, self.client)
