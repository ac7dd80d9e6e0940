"""
Async HTTP client for the SiteTrack backend.

Thin wrapper over httpx.AsyncClient that returns parsed JSON and turns every
transport or server error into FetchFailure. The dependency-chart call
reports a 404 as a NotFound value so callers can take their fallback path
without catching exceptions.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

import httpx

from sitetrack.core.config import Config
from sitetrack.core.errors import FetchFailure, Found, NotFound

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0  # seconds

# Envelope keys the backend wraps list payloads in.
LIST_ENVELOPE_KEYS = ("tasks", "issues", "projects", "data")


def unwrap_list(payload: Any, url: Optional[str] = None) -> List[Any]:
    """Return the list inside a bare or enveloped list payload."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in LIST_ENVELOPE_KEYS:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    raise FetchFailure("Expected a list payload", url=url)


def unwrap_object(payload: Any, key: str, url: Optional[str] = None) -> Dict[str, Any]:
    """Return `payload[key]` when enveloped, else the payload itself."""
    if isinstance(payload, dict):
        inner = payload.get(key)
        return inner if isinstance(inner, dict) else payload
    raise FetchFailure("Expected an object payload", url=url)


class SiteTrackClient:
    """
    Client for the project/task/issue endpoints.

    Usage:
        async with SiteTrackClient("https://example.com/api/") as client:
            projects = await client.fetch_projects()
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API root, e.g. "https://host/api/"
            timeout: Per-request timeout in seconds
            headers: Extra headers sent with every request
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/") + "/"
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json", **(headers or {})},
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> "SiteTrackClient":
        return cls(config.api_base_url, timeout=config.request_timeout, **kwargs)

    async def __aenter__(self) -> "SiteTrackClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str) -> httpx.Response:
        logger.debug("GET %s%s", self.base_url, path)
        try:
            return await self._client.get(path)
        except httpx.HTTPError as e:
            raise FetchFailure(f"Request failed: {e}", url=path) from e

    @staticmethod
    def _json(response: httpx.Response, path: str) -> Any:
        if response.is_error:
            message = response.reason_phrase or "Request failed"
            try:
                body = response.json()
                if isinstance(body, dict) and body.get("message"):
                    message = body["message"]
            except ValueError:
                pass
            raise FetchFailure(message, status_code=response.status_code, url=path)
        try:
            return response.json()
        except ValueError as e:
            raise FetchFailure("Invalid JSON response from server", status_code=response.status_code, url=path) from e

    async def get_json(self, path: str) -> Any:
        """GET `path` and return the decoded JSON body."""
        response = await self._get(path)
        return self._json(response, path)

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    async def fetch_projects(self) -> List[Dict[str, Any]]:
        return unwrap_list(await self.get_json("projects"), "projects")

    async def fetch_project(self, project_id: str) -> Dict[str, Any]:
        path = f"projects/{project_id}"
        return unwrap_object(await self.get_json(path), "project", path)

    async def fetch_dependency_chart(self, project_id: str) -> Union[Found, NotFound]:
        """
        Fetch the server-built dependency graph for a project.

        Returns:
            Found with the payload, or NotFound when the server answers 404

        Raises:
            FetchFailure: For any other error
        """
        path = f"projects/{project_id}/dependency-chart"
        response = await self._get(path)
        if response.status_code == 404:
            logger.info("No dependency chart for project %s", project_id)
            return NotFound(url=path)
        payload = self._json(response, path)
        if not isinstance(payload, dict):
            raise FetchFailure("Expected an object payload", status_code=response.status_code, url=path)
        return Found(payload)

    async def fetch_project_tasks(self, project_id: str) -> List[Dict[str, Any]]:
        path = f"tasks/{project_id}"
        return unwrap_list(await self.get_json(path), path)

    async def fetch_my_tasks(self) -> List[Dict[str, Any]]:
        return unwrap_list(await self.get_json("tasks/my-tasks"), "tasks/my-tasks")

    async def fetch_assigned_issues(self) -> List[Dict[str, Any]]:
        return unwrap_list(await self.get_json("issues/assigned"), "issues/assigned")

    async def fetch_created_issues(self) -> List[Dict[str, Any]]:
        return unwrap_list(await self.get_json("issues/myissues"), "issues/myissues")
