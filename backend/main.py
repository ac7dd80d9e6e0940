"""
SiteTrack FastAPI Backend

Exposes the work-item engine (list views, dashboard rollups and
dependency graphs) as JSON for web clients.

Architecture:
- FastAPI handles HTTP routing and response validation
- Pydantic schemas serialize the engine's dataclasses
- The sitetrack package does all classification and aggregation
- Raw records come from the upstream project API via SiteTrackClient

Run with:
    uvicorn backend.main:app --reload --port 8000

Or:
    python -m backend.main
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.routers import dashboard_router, projects_router
from backend.dependencies import get_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup: load configuration and report the upstream API.
    """
    config = get_config()
    logger.info("Config loaded from: %s", config.config_dir)
    logger.info("Upstream API: %s", config.api_base_url)

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title="SiteTrack API",
    description="""
    Work-item views for construction projects.

    ## Features

    - **Views**: Open tasks or issues, ordered by urgency
    - **Dashboard**: Open work per project and per assignee
    - **Projects**: Task dependency graphs
    """,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(dashboard_router)
app.include_router(projects_router)


@app.get("/")
async def root():
    """API root - returns basic info and available endpoints."""
    return {
        "name": "SiteTrack API",
        "version": "0.1.0",
        "docs": "/docs",
        "endpoints": {
            "views": "/views/{tasks|issues}",
            "projects": "/dashboard/projects",
            "assignees": "/dashboard/assignees",
            "graph": "/projects/{project_id}/graph",
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    config = get_config()
    return {"status": "healthy", "upstream": config.api_base_url}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
