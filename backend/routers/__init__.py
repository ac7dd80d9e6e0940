"""
API routers for the SiteTrack backend.

Each router handles a specific domain:
- dashboard: List views and dashboard rollups
- projects: Dependency graphs
"""

from .dashboard import router as dashboard_router
from .projects import router as projects_router

__all__ = [
    'dashboard_router',
    'projects_router',
]
