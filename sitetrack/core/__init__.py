"""
Core module for SiteTrack
Contains configuration, errors, data models and the record normalizer
"""

from .config import Config
from .errors import (
    SiteTrackError,
    FetchFailure,
    MalformedRecord,
    DataIntegrityWarning,
    SelfDependency,
    DependencyCycle,
    Found,
    NotFound,
)
from .models import (
    WorkItem,
    DependencyEdge,
    DependencyGraph,
    AggregationBucket,
    SubCounts,
    ProjectSummary,
    NormalizationReport,
    TASK,
    ISSUE,
    UNASSIGNED,
)
from .normalizer import normalize, normalize_many

__all__ = [
    'Config',
    'SiteTrackError', 'FetchFailure', 'MalformedRecord', 'DataIntegrityWarning',
    'SelfDependency', 'DependencyCycle', 'Found', 'NotFound',
    'WorkItem', 'DependencyEdge', 'DependencyGraph', 'AggregationBucket', 'SubCounts',
    'ProjectSummary', 'NormalizationReport', 'TASK', 'ISSUE', 'UNASSIGNED',
    'normalize', 'normalize_many',
]
