"""
Data models for the SiteTrack work-item engine
Defines the canonical work item plus the graph and aggregation shapes
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any, Tuple, FrozenSet

from .errors import MalformedRecord, DataIntegrityWarning

TASK = "task"
ISSUE = "issue"

UNASSIGNED = "unassigned"


@dataclass(frozen=True)
class WorkItem:
    """Canonical task or issue, as produced by the normalizer"""
    id: Optional[str] = None
    kind: str = TASK  # 'task', 'issue'
    title: str = "untitled"
    project_name: Optional[str] = None
    progress_percent: int = 0  # 0-100
    status: Optional[str] = None  # lower-cased
    due_date: Optional[datetime] = None
    is_critical: bool = False
    creator_name: Optional[str] = None
    assigned_user_ids: Tuple[str, ...] = ()
    dependent_item_ids: FrozenSet[str] = frozenset()
    description: Optional[str] = None
    location: Optional[str] = None
    project_id: Optional[str] = None
    created_at: Optional[datetime] = None
    declares_self_dependency: bool = False

    @property
    def is_issue(self) -> bool:
        return self.kind == ISSUE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary"""
        return {
            "id": self.id,
            "kind": self.kind,
            "title": self.title,
            "projectName": self.project_name,
            "progressPercent": self.progress_percent,
            "status": self.status,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "isCritical": self.is_critical,
            "creatorName": self.creator_name,
            "assignedUserIds": list(self.assigned_user_ids),
            "dependentItemIds": sorted(self.dependent_item_ids),
            "description": self.description,
            "location": self.location,
        }


@dataclass(frozen=True)
class DependencyEdge:
    """Edge meaning `to_id` depends on `from_id`"""
    from_id: str
    to_id: str

    def to_dict(self) -> Dict[str, str]:
        return {"from": self.from_id, "to": self.to_id}


@dataclass
class DependencyGraph:
    """Result of one graph-build call"""
    nodes: List[WorkItem] = field(default_factory=list)
    edges: List[DependencyEdge] = field(default_factory=list)
    source: str = "fallback"  # 'remote', 'fallback'
    warnings: List[DataIntegrityWarning] = field(default_factory=list)
    errors: List[MalformedRecord] = field(default_factory=list)
    payload: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "tasks": [node.to_dict() for node in self.nodes],
            "dependencies": [edge.to_dict() for edge in self.edges],
            "warnings": [str(w) for w in self.warnings],
        }


@dataclass
class SubCounts:
    issues: int = 0
    tasks: int = 0


@dataclass
class AggregationBucket:
    """Per-project or per-assignee rollup"""
    key: str
    count: int = 0
    sub_counts: SubCounts = field(default_factory=SubCounts)


@dataclass
class ProjectSummary:
    """Per-project counts for the dashboard"""
    project_id: Optional[str]
    name: Optional[str] = None
    end_date: Optional[datetime] = None
    unresolved_issue_count: int = 0
    incomplete_task_count: int = 0
    failed: bool = False

    @property
    def total_count(self) -> int:
        return self.unresolved_issue_count + self.incomplete_task_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectId": self.project_id,
            "name": self.name,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "totalCount": self.total_count,
            "unresolvedIssueCount": self.unresolved_issue_count,
            "incompleteTaskCount": self.incomplete_task_count,
        }


@dataclass
class NormalizationReport:
    """Items produced by a bulk normalization, with the records it skipped"""
    items: List[WorkItem] = field(default_factory=list)
    errors: List[MalformedRecord] = field(default_factory=list)
