"""
Project dependency graph endpoint.
"""

from fastapi import APIRouter, Depends, HTTPException

from backend.dependencies import get_dashboard_aggregator
from backend.schemas import DependencyGraphResponse
from sitetrack.core.errors import FetchFailure
from sitetrack.dashboard.aggregator import DashboardAggregator

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("/{project_id}/graph", response_model=DependencyGraphResponse)
async def get_dependency_graph(
    project_id: str,
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
):
    """
    Get the task dependency graph of a project.

    Uses the server-built chart when available, otherwise rebuilds it from
    the project's tasks. Self-dependencies and cycles are listed in `warnings`.
    """
    try:
        graph = await aggregator.dependency_graph(project_id)
    except FetchFailure as e:
        raise HTTPException(status_code=502, detail=f"Failed to build dependency graph: {e}")
    return DependencyGraphResponse.from_graph(graph)
