"""
Dashboard and list-view API endpoints.

Serves the urgency-ordered tab views and the per-project and per-assignee
rollups computed by the DashboardAggregator.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.dependencies import get_dashboard_aggregator
from backend.schemas import HeatmapRowResponse, ListViewResponse, ProjectSummaryResponse
from sitetrack.core.errors import FetchFailure
from sitetrack.dashboard.aggregator import DashboardAggregator
from sitetrack.dashboard.classifier import FilterCriteria

router = APIRouter(tags=["dashboard"])


@router.get("/views/{tab}", response_model=ListViewResponse)
async def get_list_view(
    tab: str,
    q: Optional[str] = Query(None, description="Search text"),
    limit: Optional[int] = Query(None, ge=0, description="Maximum items"),
    status: List[str] = Query([], description="Only these statuses"),
    project: List[str] = Query([], description="Only these project names"),
    created_by: List[str] = Query([], description="Only items created by these users"),
    location: List[str] = Query([], description="Only these locations"),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
):
    """
    Get open tasks or issues for a tab, ordered by urgency.

    Critical issues first, then overdue items, then by due date. Facet
    parameters may be repeated; values within a facet are ORed, facets ANDed.
    """
    if tab not in ("tasks", "issues"):
        raise HTTPException(status_code=404, detail=f"Unknown tab: {tab}")
    try:
        criteria = FilterCriteria(
            statuses=status, projects=project, created_by=created_by, locations=location,
        )
        view = await aggregator.list_view(tab, q, limit, criteria=criteria)
    except FetchFailure as e:
        raise HTTPException(status_code=502, detail=f"Failed to load {tab}: {e}")
    return ListViewResponse.from_view(view)


@router.get("/dashboard/projects", response_model=List[ProjectSummaryResponse])
async def get_project_summaries(
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
):
    """
    Get unresolved issue and incomplete task counts per project.

    Projects whose details could not be loaded are returned with zero
    counts and `failed` set.
    """
    try:
        summaries = await aggregator.project_summaries()
    except FetchFailure as e:
        raise HTTPException(status_code=502, detail=f"Failed to load projects: {e}")
    return [ProjectSummaryResponse.from_summary(s) for s in summaries]


@router.get("/dashboard/assignees", response_model=List[HeatmapRowResponse])
async def get_assignee_heatmap(
    user_id: Optional[str] = Query(None, description="Current user id"),
    user_name: Optional[str] = Query(None, description="Current user display name"),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
):
    """Get open issue counts per assignee."""
    try:
        rows = await aggregator.assignee_heatmap(user_id, user_name)
    except FetchFailure as e:
        raise HTTPException(status_code=502, detail=f"Failed to load issues: {e}")
    return [HeatmapRowResponse.from_row(row) for row in rows]
