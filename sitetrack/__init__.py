"""
SiteTrack - work-item aggregation and dependency-graph engine
for construction-project tracking.
"""

from .core import (
    Config,
    FetchFailure,
    MalformedRecord,
    SelfDependency,
    WorkItem,
    normalize,
    normalize_many,
)
from .dashboard import (
    aggregate_by_assignee,
    aggregate_by_project,
    build_dependency_graph,
    display_filter,
    is_open,
    matches_query,
    sort_by_urgency,
)

__version__ = "0.1.0"

__all__ = [
    'Config',
    'FetchFailure',
    'MalformedRecord',
    'SelfDependency',
    'WorkItem',
    'normalize',
    'normalize_many',
    'aggregate_by_assignee',
    'aggregate_by_project',
    'build_dependency_graph',
    'display_filter',
    'is_open',
    'matches_query',
    'sort_by_urgency',
]
