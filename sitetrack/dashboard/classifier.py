"""
Classification and filtering of work items into list views.

Two distinct "done" rules exist:
- The display rule decides what a list view shows. It counts 100% progress
  as closed for both tasks and issues.
- The badge rule decides the tab counters. Issues are counted by status
  only; tasks by progress or status.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional, Sequence

from sitetrack.core.models import WorkItem
from sitetrack.dashboard.prioritizer import ISSUES_MODE, TASKS_MODE, sort_by_urgency

CLOSED_ISSUE_STATUSES = frozenset({"completed", "resolved"})
CLOSED_TASK_STATUS = "completed"

DEFAULT_LIST_LIMIT = 20


@dataclass
class BadgeCounts:
    """Counters shown on the issues/tasks tabs."""
    unresolved_issues: int = 0
    incomplete_tasks: int = 0


@dataclass
class FilterOptions:
    """Distinct facet values available in a collection, sorted."""
    statuses: List[str] = field(default_factory=list)
    projects: List[str] = field(default_factory=list)
    creators: List[str] = field(default_factory=list)
    locations: List[str] = field(default_factory=list)


@dataclass
class FilterCriteria:
    """Selected facet values. An empty facet does not filter."""
    statuses: List[str] = field(default_factory=list)
    projects: List[str] = field(default_factory=list)
    created_by: List[str] = field(default_factory=list)
    locations: List[str] = field(default_factory=list)

    def active_count(self) -> int:
        return len(self.statuses) + len(self.projects) + len(self.created_by) + len(self.locations)


def is_open(item: WorkItem) -> bool:
    """Whether the item is still actionable and belongs in a list view."""
    status = item.status or ""
    if item.progress_percent == 100:
        return False
    if item.is_issue:
        return status not in CLOSED_ISSUE_STATUSES
    return status != CLOSED_TASK_STATUS


def display_filter(item: WorkItem, active_tab: str) -> bool:
    """
    Whether the item is shown under `active_tab`.

    Tasks flagged as issues only ever appear under the issues tab.
    """
    if not is_open(item):
        return False
    if active_tab == TASKS_MODE:
        return not item.is_issue
    return True


def matches_query(item: WorkItem, query: Optional[str]) -> bool:
    """Case-insensitive substring match on title, description, project or creator."""
    if not query:
        return True
    needle = query.lower()
    haystacks = (item.title, item.description, item.project_name, item.creator_name)
    return any(needle in (text or "").lower() for text in haystacks)


def is_unresolved_issue(item: WorkItem) -> bool:
    return (item.status or "") not in CLOSED_ISSUE_STATUSES


def is_incomplete_task(item: WorkItem) -> bool:
    return item.progress_percent < 100 and (item.status or "") != CLOSED_TASK_STATUS


def badge_counts(tasks: Iterable[WorkItem], issues: Iterable[WorkItem]) -> BadgeCounts:
    return BadgeCounts(
        unresolved_issues=sum(1 for issue in issues if is_unresolved_issue(issue)),
        incomplete_tasks=sum(1 for task in tasks if is_incomplete_task(task)),
    )


def filter_options(items: Iterable[WorkItem]) -> FilterOptions:
    """Collect the facet values present in `items`."""
    statuses, projects, creators, locations = set(), set(), set(), set()
    for item in items:
        if item.status:
            statuses.add(item.status)
        if item.project_name:
            projects.add(item.project_name)
        if item.creator_name:
            creators.add(item.creator_name)
        if item.location:
            locations.add(item.location)

    return FilterOptions(
        statuses=sorted(statuses),
        projects=sorted(projects),
        creators=sorted(creators),
        locations=sorted(locations),
    )


def _facet_matches(selected: Sequence[str], value: Optional[str]) -> bool:
    return not selected or value in selected


def apply_filters(
    items: Iterable[WorkItem],
    query: Optional[str] = None,
    criteria: Optional[FilterCriteria] = None,
) -> List[WorkItem]:
    """Keep items matching the query and every non-empty facet."""
    criteria = criteria or FilterCriteria()
    statuses = [s.lower() for s in criteria.statuses]
    return [
        item for item in items
        if matches_query(item, query)
        and _facet_matches(statuses, item.status)
        and _facet_matches(criteria.projects, item.project_name)
        and _facet_matches(criteria.created_by, item.creator_name)
        and _facet_matches(criteria.locations, item.location)
    ]


def build_list_view(
    tasks: Iterable[WorkItem],
    issues: Iterable[WorkItem],
    active_tab: str = ISSUES_MODE,
    query: Optional[str] = None,
    limit: Optional[int] = DEFAULT_LIST_LIMIT,
    today: Optional[date] = None,
    criteria: Optional[FilterCriteria] = None,
) -> List[WorkItem]:
    """
    Build the items shown under a tab: visible, matching, urgency-ordered.

    Args:
        tasks: Normalized tasks (the tasks tab source)
        issues: Normalized issues (the issues tab source)
        active_tab: 'tasks' or 'issues'
        query: Already-debounced search text
        limit: Maximum number of items, None for all
        today: Reference date for urgency
        criteria: Facet selections (status, project, creator, location)

    Returns:
        Ordered list of work items
    """
    source = tasks if active_tab == TASKS_MODE else issues
    visible = apply_filters(
        (item for item in source if display_filter(item, active_tab)),
        query,
        criteria,
    )
    ordered = sort_by_urgency(visible, active_tab, today)
    if limit is not None and limit >= 0:
        return ordered[:limit]
    return ordered
