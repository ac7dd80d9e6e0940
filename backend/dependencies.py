"""
Dependency injection for FastAPI endpoints.

Provides a cached Config, a per-request SiteTrackClient and the
DashboardAggregator built on top of them.
"""

from functools import lru_cache
from typing import AsyncIterator

from fastapi import Depends

from sitetrack.core.config import Config
from sitetrack.dashboard.aggregator import DashboardAggregator
from sitetrack.integrations.api_client import SiteTrackClient


@lru_cache()
def get_config() -> Config:
    """
    Get cached Config instance.

    lru_cache ensures we only create one Config instance
    for the lifetime of the application.
    """
    return Config()


async def get_client(config: Config = Depends(get_config)) -> AsyncIterator[SiteTrackClient]:
    """Open a client for the duration of one request."""
    client = SiteTrackClient.from_config(config)
    try:
        yield client
    finally:
        await client.aclose()


def get_dashboard_aggregator(
    client: SiteTrackClient = Depends(get_client),
    config: Config = Depends(get_config),
) -> DashboardAggregator:
    """Get DashboardAggregator for dashboard data."""
    return DashboardAggregator(client, config)
