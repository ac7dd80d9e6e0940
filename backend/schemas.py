"""
Pydantic schemas for API responses.

These schemas provide:
- Type safety for API outputs
- OpenAPI documentation generation
- Serialization of engine dataclasses
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from sitetrack.core.models import DependencyGraph, ProjectSummary, WorkItem
from sitetrack.dashboard.aggregator import HeatmapRow, ListView


# =============================================================================
# Base Response Schemas
# =============================================================================

class ErrorResponse(BaseModel):
    """Error response for API errors."""
    detail: str
    code: Optional[str] = None


# =============================================================================
# Work Item Schemas
# =============================================================================

class WorkItemResponse(BaseModel):
    """Normalized task or issue."""
    id: Optional[str] = None
    kind: str
    title: str
    project_name: Optional[str] = None
    progress_percent: int = Field(ge=0, le=100)
    status: Optional[str] = None
    due_date: Optional[str] = None
    is_critical: bool = False
    creator_name: Optional[str] = None
    assigned_user_ids: List[str] = []
    dependent_item_ids: List[str] = []
    description: Optional[str] = None
    location: Optional[str] = None

    @classmethod
    def from_item(cls, item: WorkItem) -> "WorkItemResponse":
        return cls(
            id=item.id,
            kind=item.kind,
            title=item.title,
            project_name=item.project_name,
            progress_percent=item.progress_percent,
            status=item.status,
            due_date=item.due_date.isoformat() if item.due_date else None,
            is_critical=item.is_critical,
            creator_name=item.creator_name,
            assigned_user_ids=list(item.assigned_user_ids),
            dependent_item_ids=sorted(item.dependent_item_ids),
            description=item.description,
            location=item.location,
        )


class BadgeCountsResponse(BaseModel):
    unresolved_issues: int
    incomplete_tasks: int


class FilterOptionsResponse(BaseModel):
    """Facet values available under the active tab."""
    statuses: List[str] = []
    projects: List[str] = []
    creators: List[str] = []
    locations: List[str] = []


class ListViewResponse(BaseModel):
    """Items under one tab plus counters for both tabs."""
    tab: str
    query: Optional[str] = None
    items: List[WorkItemResponse]
    badges: BadgeCountsResponse
    options: FilterOptionsResponse = FilterOptionsResponse()
    skipped_records: int = 0

    @classmethod
    def from_view(cls, view: ListView) -> "ListViewResponse":
        return cls(
            tab=view.tab,
            query=view.query,
            items=[WorkItemResponse.from_item(item) for item in view.items],
            badges=BadgeCountsResponse(
                unresolved_issues=view.badges.unresolved_issues,
                incomplete_tasks=view.badges.incomplete_tasks,
            ),
            options=FilterOptionsResponse(
                statuses=view.options.statuses,
                projects=view.options.projects,
                creators=view.options.creators,
                locations=view.options.locations,
            ),
            skipped_records=len(view.errors),
        )


# =============================================================================
# Dashboard Schemas
# =============================================================================

class ProjectSummaryResponse(BaseModel):
    """Open-work counts for one project."""
    project_id: Optional[str] = None
    name: Optional[str] = None
    end_date: Optional[str] = None
    unresolved_issue_count: int
    incomplete_task_count: int
    total_count: int
    failed: bool = False

    @classmethod
    def from_summary(cls, summary: ProjectSummary) -> "ProjectSummaryResponse":
        return cls(
            project_id=summary.project_id,
            name=summary.name,
            end_date=summary.end_date.isoformat() if summary.end_date else None,
            unresolved_issue_count=summary.unresolved_issue_count,
            incomplete_task_count=summary.incomplete_task_count,
            total_count=summary.total_count,
            failed=summary.failed,
        )


class HeatmapRowResponse(BaseModel):
    user_id: str
    user_name: str
    count: int

    @classmethod
    def from_row(cls, row: HeatmapRow) -> "HeatmapRowResponse":
        return cls(user_id=row.user_id, user_name=row.user_name, count=row.count)


# =============================================================================
# Dependency Graph Schemas
# =============================================================================

class DependencyEdgeResponse(BaseModel):
    """`to_id` depends on `from_id`."""
    from_id: str
    to_id: str


class DependencyGraphResponse(BaseModel):
    source: str
    nodes: List[WorkItemResponse]
    edges: List[DependencyEdgeResponse]
    warnings: List[str] = []
    skipped_records: int = 0

    @classmethod
    def from_graph(cls, graph: DependencyGraph) -> "DependencyGraphResponse":
        return cls(
            source=graph.source,
            nodes=[WorkItemResponse.from_item(node) for node in graph.nodes],
            edges=[DependencyEdgeResponse(from_id=e.from_id, to_id=e.to_id) for e in graph.edges],
            warnings=[str(w) for w in graph.warnings],
            skipped_records=len(graph.errors),
        )
