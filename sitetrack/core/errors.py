"""
Error kinds and fetch result variants for the SiteTrack engine.

Normalization and filtering never raise; malformed records are collected
and returned alongside the results. Fetch failures propagate to the caller.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class SiteTrackError(Exception):
    """Base class for all engine errors."""
    pass


class FetchFailure(SiteTrackError):
    """Raised when the backend cannot be reached or returns an error."""
    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.url = url
        super().__init__(message if status_code is None else f"{status_code}: {message}")


class MalformedRecord(SiteTrackError):
    """A raw record whose identity could not be resolved."""
    def __init__(self, raw: Any, reason: str = "no resolvable id"):
        self.raw = raw
        self.reason = reason
        super().__init__(reason)


class DataIntegrityWarning(SiteTrackError):
    """Base for dependency data problems that are reported, not dropped."""
    pass


class SelfDependency(DataIntegrityWarning):
    """A task declares itself (or its parent) as a dependency."""
    def __init__(self, task_id: str, dependency_id: Optional[str] = None):
        self.task_id = task_id
        self.dependency_id = dependency_id if dependency_id is not None else task_id
        if self.dependency_id == task_id:
            message = f"Task {task_id} depends on itself"
        else:
            message = f"Task {task_id} depends on its parent {self.dependency_id}"
        super().__init__(message)


class DependencyCycle(DataIntegrityWarning):
    """A chain of dependencies that loops back onto its start."""
    def __init__(self, cycle: List[str]):
        self.cycle = list(cycle)
        super().__init__("Dependency cycle: " + " -> ".join(self.cycle))


@dataclass
class Found:
    """Successful fetch carrying the parsed payload."""
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass
class NotFound:
    """Fetch answered with 'not found'; callers take their fallback path."""
    url: Optional[str] = None
    message: str = "not found"
